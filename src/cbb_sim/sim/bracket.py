"""National championship selection and bracket.

Selection fills a power-of-two field:

* **Auto-bids**: every conference tournament champion, in conference-label
  order, up to the field size.
* **At-large**: the remaining slots go to the best non-champions by
  :func:`~cbb_sim.sim.standings.selection_score`.

The field is then re-seeded by selection score, seed ``k`` meeting seed
``size + 1 - k`` in round one.  Building the bracket only pairs round one;
rounds are played one at a time by :func:`advance_round`, each later round
pairing the previous round's winners best-versus-worst by bracket slot.
"""

from __future__ import annotations

import logging

from cbb_sim.ingest.schema import Team
from cbb_sim.sim.outcome import simulate_game
from cbb_sim.sim.standings import rank_by_selection
from cbb_sim.sim.tournament import conference_champions, pair_round
from cbb_sim.sim.universe import Bracket, BracketState, Universe

logger = logging.getLogger(__name__)

#: Field sizes in order of preference.
FIELD_SIZES: tuple[int, ...] = (64, 32, 16, 8)

_ROUND_NAMES: dict[int, str] = {
    16: "Sweet 16",
    8: "Elite 8",
    4: "Final 4",
    2: "Championship",
}


def field_size(n_teams: int) -> int:
    """Largest supported field that does not exceed *n_teams*.

    Universes smaller than eight teams fall back to the largest power of
    two that fits; fewer than two teams yield ``0``.
    """
    for size in FIELD_SIZES:
        if n_teams >= size:
            return size
    if n_teams < 2:
        return 0
    return 1 << (n_teams.bit_length() - 1)


def round_label(teams_in_round: int) -> str:
    """Display name for a round that starts with *teams_in_round* teams."""
    return _ROUND_NAMES.get(teams_in_round, f"Round of {teams_in_round}")


def select_field(universe: Universe, size: int) -> list[Team]:
    """Choose *size* teams: auto-bids first, then at-large by selection score.

    Returns:
        Selected teams in selection order (not yet seeded).
    """
    selected: list[Team] = []
    auto_ids: set[int] = set()
    for conf, champ_id in conference_champions(universe).items():
        auto_ids.add(champ_id)
        if len(selected) < size:
            selected.append(universe.team(champ_id))
        else:
            logger.warning("field full; %s champion %s loses its auto-bid", conf, universe.team(champ_id).name)

    for team in rank_by_selection(list(universe.teams.values())):
        if len(selected) >= size:
            break
        if team.team_id not in auto_ids:
            selected.append(team)
    return selected


def build_national_bracket(universe: Universe) -> Bracket:
    """Select, seed and pair round one of the national bracket.

    Requires the conference tournaments to have been played; otherwise the
    call only logs a warning and the bracket stays ``NOT_BUILT``.  Round one
    is paired but not played.  Rebuilding a bracket that is already in
    progress or complete is also a no-op.

    Returns:
        The universe's national bracket.
    """
    if universe.conf_tournament_state is not BracketState.COMPLETE:
        logger.warning("conference tournaments have not been played; national bracket not built")
        return universe.bracket
    if universe.bracket.state is not BracketState.NOT_BUILT:
        logger.info("national bracket already built; nothing to do")
        return universe.bracket

    size = field_size(len(universe.teams))
    seeded = rank_by_selection(select_field(universe, size))
    for team in universe.teams.values():
        team.seed_note = ""
    for seed, team in enumerate(seeded, start=1):
        team.seed_note = f"Seed {seed}"

    bracket = Bracket(name="National", entrants=[t.team_id for t in seeded])
    if len(seeded) >= 2:
        games, bye = pair_round(bracket.entrants, kind="national", round_index=0)
        bracket.rounds.append(games)
        bracket.byes.append(bye)
        bracket.state = BracketState.IN_PROGRESS
    else:
        bracket.state = BracketState.COMPLETE
    universe.bracket = bracket

    logger.info("national bracket: %d-team field", len(seeded))
    return bracket


def advance_round(universe: Universe) -> bool:
    """Play the next round of the national bracket.

    If the latest round still has unplayed games they are played; otherwise
    the survivors are paired into a new round and that round is played.
    The bracket becomes ``COMPLETE`` once one team remains.

    Returns:
        ``True`` if any game was played, ``False`` for a no-op (bracket not
        built or already complete).
    """
    bracket = universe.bracket
    if bracket.state is not BracketState.IN_PROGRESS:
        if bracket.state is BracketState.NOT_BUILT:
            logger.warning("national bracket has not been built; nothing to advance")
        return False

    if bracket.current_round_played:
        games, bye = pair_round(bracket.survivors(), kind="national", round_index=len(bracket.rounds))
        bracket.rounds.append(games)
        bracket.byes.append(bye)

    current = bracket.rounds[-1]
    label = round_label(len(current) * 2 + (bracket.byes[-1] is not None))
    for game in current:
        simulate_game(universe, game)
    logger.info("%s: %d games played", label, len(current))

    if len(bracket.survivors()) <= 1:
        bracket.state = BracketState.COMPLETE
        champ = bracket.champion_id
        if champ is not None:
            logger.info("national champion: %s", universe.team(champ).name)
    return True


def advance_bracket(universe: Universe) -> int:
    """Play national bracket rounds until a champion emerges.

    Safe to call repeatedly; once the bracket is complete it does nothing.

    Returns:
        Number of rounds played by this call.
    """
    rounds = 0
    while advance_round(universe):
        rounds += 1
    return rounds
