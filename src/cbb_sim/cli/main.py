"""Typer CLI application for the college basketball simulator.

Each command loads the saved universe from ``--data-dir``, runs one phase
and saves it back, so a league can be stepped through a season from the
shell::

    cbb-sim new --csv teams.csv --seed 2025-season
    cbb-sim schedule --mode double
    cbb-sim simulate --weeks 4
    cbb-sim simulate
    cbb-sim tournaments
    cbb-sim bracket
    cbb-sim advance --all
"""

from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from cbb_sim.cli import render
from cbb_sim.config import LeagueConfig
from cbb_sim.ingest.connectors import Connector, ConnectorError, CsvRosterConnector, WikipediaConnector, write_roster_csv
from cbb_sim.ingest.repository import ParquetUniverseRepository
from cbb_sim.sim import (
    BracketState,
    Universe,
    advance_bracket,
    advance_round,
    build_conference_tournaments,
    build_national_bracket,
    create_universe,
    generate_schedule,
    hash_seed,
    is_season_complete,
    power_rankings,
    simulate_season,
    simulate_week,
    standings_frame,
)
from cbb_sim.utils.logger import configure_logging

app = typer.Typer(help="College basketball season and tournament simulator")
console = Console()

_DEFAULT_DATA_DIR = Path("data/universe")


@app.callback()
def _callback(
    ctx: typer.Context,
    data_dir: Path = typer.Option(_DEFAULT_DATA_DIR, "--data-dir", help="Directory holding the saved universe"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="QUIET, NORMAL, VERBOSE or DEBUG (default: $CBB_SIM_LOG_LEVEL or NORMAL)"
    ),
) -> None:
    """cbb-sim: seeded college basketball seasons, conference tournaments and a national bracket."""
    try:
        configure_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc
    ctx.obj = ParquetUniverseRepository(base_path=data_dir)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {escape(message)}[/red]")
    return typer.Exit(code=1)


def _load(ctx: typer.Context) -> tuple[ParquetUniverseRepository, Universe, LeagueConfig]:
    repo: ParquetUniverseRepository = ctx.obj
    try:
        universe, config = repo.load()
    except FileNotFoundError:
        raise _fail(f"No universe in {repo.base_path}. Run `cbb-sim new` first.") from None
    return repo, universe, config


def _read_config(config_path: Path | None, seed: str | None, year: int | None) -> LeagueConfig:
    try:
        config = LeagueConfig.from_json(config_path) if config_path is not None else LeagueConfig()
    except FileNotFoundError as exc:
        raise _fail(str(exc)) from None
    except ValidationError as exc:
        raise _fail(f"Invalid config {config_path}: {exc}") from None
    overrides: dict[str, object] = {}
    if seed is not None:
        overrides["seed_phrase"] = seed
    if year is not None:
        overrides["year"] = year
    return config.model_copy(update=overrides)


def _connector(csv_path: Path | None, wikipedia: bool, config: LeagueConfig) -> Connector:
    if (csv_path is None) == (not wikipedia):
        raise _fail("Pass exactly one of --csv or --wikipedia.")
    if csv_path is not None:
        return CsvRosterConnector(csv_path)
    jitter_seed = hash_seed(config.seed_phrase) if config.seed_phrase else None
    return WikipediaConnector(jitter_seed=jitter_seed)


def _create(csv_path: Path | None, wikipedia: bool, config: LeagueConfig) -> Universe:
    connector = _connector(csv_path, wikipedia, config)
    try:
        entries = connector.fetch_roster()
        return create_universe(entries, config.seed_phrase, year=config.year, outcome=config.outcome())
    except ConnectorError as exc:
        raise _fail(str(exc)) from None
    except ValueError as exc:
        raise _fail(f"Invalid roster: {exc}") from None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

_CSV_OPTION = typer.Option(None, "--csv", help="Roster CSV (School,Nickname,Conference,Rating)")
_WIKI_OPTION = typer.Option(False, "--wikipedia", help="Fetch the Division I roster from Wikipedia")
_SEED_OPTION = typer.Option(None, "--seed", help="Seed phrase, e.g. 2025-season (\"\" for an unseeded run)")
_CONFIG_OPTION = typer.Option(None, "--config", help="Path to JSON league config override")
_YEAR_OPTION = typer.Option(None, "--year", help="Season year")


@app.command()
def new(
    ctx: typer.Context,
    csv_path: Path | None = _CSV_OPTION,
    wikipedia: bool = _WIKI_OPTION,
    seed: str | None = _SEED_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    year: int | None = _YEAR_OPTION,
) -> None:
    """Create a new universe from a roster source and save it."""
    repo: ParquetUniverseRepository = ctx.obj
    config = _read_config(config_path, seed, year)
    universe = _create(csv_path, wikipedia, config)
    repo.save(universe, config)
    console.print(render.summary_table(universe))


@app.command()
def schedule(
    ctx: typer.Context,
    mode: str | None = typer.Option(None, "--mode", help="Round robin: single or double"),
    non_conf: int | None = typer.Option(None, "--non-conf", help="Non-conference games per team"),
) -> None:
    """Generate the regular-season schedule (replaces any existing one)."""
    repo, universe, config = _load(ctx)
    try:
        n_games = generate_schedule(
            universe,
            mode=mode or config.round_robin,  # type: ignore[arg-type]
            non_conf_games=config.non_conference_games if non_conf is None else non_conf,
        )
    except ValueError as exc:
        raise _fail(str(exc)) from None
    repo.save(universe, config)
    console.print(f"Scheduled [bold]{n_games}[/bold] games over {universe.week - 1} weeks.")


@app.command()
def simulate(
    ctx: typer.Context,
    weeks: int | None = typer.Option(None, "--weeks", min=1, help="Weeks to simulate (default: rest of season)"),
) -> None:
    """Simulate regular-season games."""
    repo, universe, config = _load(ctx)
    if not universe.games:
        raise _fail("No schedule. Run `cbb-sim schedule` first.")
    if weeks is None:
        played = simulate_season(universe)
    else:
        played = sum(simulate_week(universe) for _ in range(weeks))
    repo.save(universe, config)
    status = "complete" if is_season_complete(universe) else f"next week {universe.week}"
    console.print(f"Simulated [bold]{played}[/bold] games ({status}).")


@app.command()
def tournaments(ctx: typer.Context) -> None:
    """Play every conference tournament."""
    repo, universe, config = _load(ctx)
    if not is_season_complete(universe):
        raise _fail("The regular season is not finished. Run `cbb-sim simulate` first.")
    build_conference_tournaments(universe)
    repo.save(universe, config)
    console.print(render.champions_table(universe))


@app.command()
def bracket(ctx: typer.Context) -> None:
    """Select and seed the national bracket."""
    repo, universe, config = _load(ctx)
    if universe.conf_tournament_state is not BracketState.COMPLETE:
        raise _fail("Conference tournaments have not been played. Run `cbb-sim tournaments` first.")
    national = build_national_bracket(universe)
    repo.save(universe, config)
    console.print(render.field_table(universe, national))


@app.command()
def advance(
    ctx: typer.Context,
    play_all: bool = typer.Option(False, "--all", help="Play every remaining round"),
) -> None:
    """Play the next round (or all rounds) of the national bracket."""
    repo, universe, config = _load(ctx)
    national = universe.bracket
    if national.state is BracketState.NOT_BUILT:
        raise _fail("The national bracket has not been built. Run `cbb-sim bracket` first.")
    if national.state is BracketState.COMPLETE:
        render.print_champion(console, universe)
        return

    first = len(national.rounds) - (0 if national.current_round_played else 1)
    if play_all:
        advance_bracket(universe)
    else:
        advance_round(universe)
    repo.save(universe, config)
    for idx in range(first, len(universe.bracket.rounds)):
        console.print(render.round_table(universe, universe.bracket, idx))
    render.print_champion(console, universe)


@app.command()
def standings(
    ctx: typer.Context,
    conference: str | None = typer.Option(None, "--conference", help="Show one conference only"),
) -> None:
    """Show conference standings."""
    _, universe, _ = _load(ctx)
    labels = universe.conference_labels()
    if conference is not None:
        if conference not in labels:
            raise _fail(f"Unknown conference {conference!r}.")
        labels = [conference]
    for label in labels:
        console.print(render.frame_table(standings_frame(universe, label), title=label))


@app.command()
def rankings(
    ctx: typer.Context,
    top: int = typer.Option(25, "--top", min=1, help="Number of teams to show"),
) -> None:
    """Show the league-wide power rankings (selection score)."""
    _, universe, _ = _load(ctx)
    console.print(render.frame_table(power_rankings(universe, top=top), title="Power Rankings"))


@app.command("export-teams")
def export_teams(
    ctx: typer.Context,
    output: Path = typer.Option(Path("teams.csv"), "--output", "-o", help="CSV file to write"),
) -> None:
    """Export the roster as a CSV that `cbb-sim new --csv` can read back."""
    _, universe, _ = _load(ctx)
    n_rows = write_roster_csv(universe.teams.values(), output)
    console.print(f"Wrote [bold]{n_rows}[/bold] teams to {output}.")


@app.command()
def run(  # noqa: PLR0913
    ctx: typer.Context,
    csv_path: Path | None = _CSV_OPTION,
    wikipedia: bool = _WIKI_OPTION,
    seed: str | None = _SEED_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    year: int | None = _YEAR_OPTION,
    top: int = typer.Option(10, "--top", min=1, help="Ranked teams to show at the end"),
) -> None:
    """Create a universe and run the full season through the national final."""
    repo: ParquetUniverseRepository = ctx.obj
    config = _read_config(config_path, seed, year)
    universe = _create(csv_path, wikipedia, config)

    generate_schedule(universe, mode=config.round_robin, non_conf_games=config.non_conference_games)
    simulate_season(universe)
    build_conference_tournaments(universe)
    build_national_bracket(universe)
    advance_bracket(universe)
    repo.save(universe, config)

    console.print(render.summary_table(universe))
    console.print(render.frame_table(power_rankings(universe, top=top), title="Final Power Rankings"))
    render.print_champion(console, universe)
