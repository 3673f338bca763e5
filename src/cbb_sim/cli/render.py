"""Rich rendering helpers for the ``cbb-sim`` CLI.

Every helper takes a :class:`~rich.console.Console` so tests can capture
or silence output with ``Console(quiet=True)``.
"""

from __future__ import annotations

import pandas as pd  # type: ignore[import-untyped]
from rich.console import Console
from rich.table import Table

from cbb_sim.ingest.schema import Game
from cbb_sim.sim.bracket import round_label
from cbb_sim.sim.universe import Bracket, BracketState, Universe

_NUMERIC_KINDS = "iuf"


def frame_table(df: pd.DataFrame, *, title: str) -> Table:
    """Build a Rich table from a DataFrame, right-aligning numeric columns."""
    table = Table(title=title)
    for col in df.columns:
        numeric = df[col].dtype.kind in _NUMERIC_KINDS
        table.add_column(str(col), justify="right" if numeric else "left", style="cyan" if col == "team" else None)
    for row in df.itertuples(index=False):
        table.add_row(*(str(v) for v in row))
    return table


def summary_table(universe: Universe, *, title: str = "Universe") -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    played = sum(g.played for g in universe.games)
    table.add_row("Year", str(universe.year))
    table.add_row("Seed phrase", universe.seed_phrase or "(unseeded)")
    table.add_row("Teams", str(len(universe.teams)))
    table.add_row("Conferences", str(len(universe.conferences())))
    table.add_row("Week", str(universe.week))
    table.add_row("Games played", f"{played}/{len(universe.games)}")
    table.add_row("Conference tournaments", universe.conf_tournament_state.value)
    table.add_row("National bracket", universe.bracket.state.value)
    return table


def champions_table(universe: Universe) -> Table:
    table = Table(title="Conference Champions")
    table.add_column("Conference", style="cyan")
    table.add_column("Champion", style="green")
    table.add_column("Record", justify="right")
    table.add_column("Rounds", justify="right")
    for conf in sorted(universe.conf_tournaments):
        bracket = universe.conf_tournaments[conf]
        champ = bracket.champion_id
        if champ is None:
            table.add_row(conf, "-", "-", "0")
            continue
        team = universe.team(champ)
        table.add_row(conf, team.name, team.record, str(len(bracket.rounds)))
    return table


def field_table(universe: Universe, bracket: Bracket) -> Table:
    table = Table(title=f"{bracket.name} Field ({len(bracket.entrants)} teams)")
    table.add_column("Seed", justify="right")
    table.add_column("Team", style="cyan")
    table.add_column("Conference")
    table.add_column("Record", justify="right")
    for seed, team_id in enumerate(bracket.entrants, start=1):
        team = universe.team(team_id)
        table.add_row(str(seed), team.name, team.conference or "Independent", team.record)
    return table


def round_table(universe: Universe, bracket: Bracket, round_index: int) -> Table:
    """Results (or pairings, if unplayed) of one bracket round."""
    games = bracket.rounds[round_index]
    bye = bracket.byes[round_index]
    table = Table(title=round_label(len(games) * 2 + (bye is not None)))
    table.add_column("Home", style="cyan")
    table.add_column("Score", justify="center")
    table.add_column("Away", style="cyan")
    for game in games:
        table.add_row(universe.team(game.home_id).name, _score(game), universe.team(game.away_id).name)
    if bye is not None:
        table.add_row(universe.team(bye).name, "bye", "")
    return table


def print_champion(console: Console, universe: Universe) -> None:
    bracket = universe.bracket
    if bracket.state is not BracketState.COMPLETE:
        return
    champ = bracket.champion_id
    if champ is None:
        console.print("[yellow]No national champion: the field was too small.[/yellow]")
        return
    team = universe.team(champ)
    console.print(f"[bold green]National champion: {team.name} ({team.record})[/bold green]")


def _score(game: Game) -> str:
    if not game.played:
        return "vs"
    return f"{game.home_score}-{game.away_score}"
