"""Wikipedia roster connector for the full Division I field.

Fetches the "List of NCAA Division I men's basketball programs" article via
the MediaWiki parse API and scrapes every ``wikitable`` that has a team (or
school) column and a conference column.

Ratings are not on Wikipedia.  Each team gets its conference's average
rating plus a small integer jitter.  The jitter is the one place where the
package draws randomness outside a universe's seeded stream: pass
``jitter_seed`` for a reproducible roster, or leave it ``None`` for variety.
"""

from __future__ import annotations

import logging
import re
from io import StringIO

import numpy as np
import pandas as pd  # type: ignore[import-untyped]
import requests
from rapidfuzz import fuzz, process

from cbb_sim.ingest.connectors.base import Connector, DataFormatError, NetworkError
from cbb_sim.ingest.schema import RosterEntry, clamp_rating

logger = logging.getLogger(__name__)

WIKI_API_URL: str = "https://en.wikipedia.org/w/api.php"
WIKI_PAGE: str = "List_of_NCAA_Division_I_men's_basketball_programs"

#: Below this many parsed teams the page layout has probably changed.
MIN_EXPECTED_TEAMS: int = 320

#: Rating for teams in a conference missing from :data:`CONF_AVG_RATING`.
DEFAULT_CONF_RATING: float = 74.0

#: Jitter bound (inclusive, in rating points) around the conference average.
RATING_JITTER: int = 4

# Minimum rapidfuzz token-set score to map an unknown label onto a known one.
_FUZZY_THRESHOLD = 85

CONF_AVG_RATING: dict[str, float] = {
    "Big Ten": 86,
    "Big 12": 86,
    "SEC": 85,
    "Big East": 84,
    "ACC": 83,
    "Mountain West": 82,
    "American Athletic": 79,
    "West Coast": 79,
    "Atlantic 10": 78,
    "Missouri Valley": 77,
    "Conference USA": 75,
    "Sun Belt": 74,
    "Colonial": 74,
    "MAC": 74,
    "SoCon": 73,
    "Ivy": 73,
    "Western Athletic": 73,
    "Big Sky": 72,
    "Horizon": 72,
    "Summit League": 72,
    "Big South": 71,
    "MAAC": 71,
    "Ohio Valley": 71,
    "Patriot": 71,
    "ASUN": 71,
    "America East": 71,
    "Southland": 70,
    "NEC": 68,
    "MEAC": 67,
    "SWAC": 66,
}

# Ordered (pattern, canonical label) rewrites applied before the rating lookup.
_CONF_ALIASES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), label)
    for pattern, label in (
        (r"^American Athletic Conference.*", "American Athletic"),
        (r"^(Atlantic\s*10|A-10).*", "Atlantic 10"),
        (r"^(West Coast Conference.*|WCC)$", "West Coast"),
        (r"^(Mountain West Conference.*|MWC)$", "Mountain West"),
        (r"^(Western Athletic Conference.*|WAC)$", "Western Athletic"),
        (r"^Missouri Valley Conference.*", "Missouri Valley"),
        (r"^(Colonial Athletic Association.*|Coastal Athletic Association.*|CAA)$", "Colonial"),
        (r"^Sun Belt Conference.*", "Sun Belt"),
        (r"^Horizon League.*", "Horizon"),
        (r"^Patriot League.*", "Patriot"),
        (r"^America East Conference.*", "America East"),
        (r"^(Atlantic Sun.*|A-Sun)$", "ASUN"),
        (r"^AAC$", "American Athletic"),
    )
)

_TWO_WORD_NICKNAMES: frozenset[str] = frozenset(
    {
        "Big Red",
        "Black Bears",
        "Blue Demons",
        "Blue Devils",
        "Blue Hens",
        "Blue Raiders",
        "Crimson Tide",
        "Demon Deacons",
        "Fighting Illini",
        "Fighting Irish",
        "Golden Bears",
        "Golden Eagles",
        "Golden Flashes",
        "Golden Gophers",
        "Golden Griffins",
        "Golden Grizzlies",
        "Golden Hurricane",
        "Great Danes",
        "Green Wave",
        "Horned Frogs",
        "Mean Green",
        "Nittany Lions",
        "Purple Aces",
        "Rainbow Warriors",
        "Red Foxes",
        "Red Raiders",
        "Red Storm",
        "River Hawks",
        "Scarlet Knights",
        "Sun Devils",
        "Tar Heels",
        "Yellow Jackets",
    }
)

_NICKNAMES: frozenset[str] = frozenset(
    name.lower()
    for name in (
        "Aggies Antelopes Aztecs Badgers Bearcats Bears Bison Bluejays Bobcats Boilermakers "
        "Broncos Bruins Buckeyes Buffaloes Bulldogs Catamounts Cavaliers Commodores Cornhuskers "
        "Cougars Cowboys Cyclones Dolphins Ducks Eagles Flames Flyers Friars Gaels Gamecocks "
        "Gators Gophers Grizzlies Hawkeyes Hokies Hoosiers Hoyas Hurricanes Huskies Jayhawks "
        "Knights Lancers Lions Lobos Longhorns Lumberjacks Mastodons Mountaineers Musketeers "
        "Orange Owls Panthers Penguins Pirates Privateers Raiders Rams Razorbacks Rebels "
        "Salukis Seahawks Seawolves Seminoles Sooners Spartans Terrapins Thunderbirds Tigers "
        "Titans Trojans Utes Vikings Volunteers Waves Wildcats Wolfpack Cardinals"
    ).split()
)

_FOOTNOTE = re.compile(r"\[\w+\]")


class WikipediaConnector(Connector):
    """Connector scraping the Division I program list from Wikipedia.

    Args:
        session: Optional ``requests`` session (tests inject a fake).
        timeout: HTTP timeout in seconds.
        jitter_seed: Seed for the rating jitter; ``None`` is unseeded.
    """

    def __init__(
        self,
        *,
        session: requests.Session | None = None,
        timeout: float = 30.0,
        jitter_seed: int | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout
        self._jitter_seed = jitter_seed

    # -- network step -------------------------------------------------------

    def fetch_html(self) -> str:
        """Download the rendered article HTML.

        Raises:
            NetworkError: On connection failure or HTTP error status.
            DataFormatError: If the API answers without article HTML.
        """
        params = {
            "action": "parse",
            "page": WIKI_PAGE,
            "prop": "text",
            "formatversion": "2",
            "format": "json",
        }
        try:
            response = self._session.get(WIKI_API_URL, params=params, timeout=self._timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            msg = f"wikipedia: fetch failed: {exc}"
            raise NetworkError(msg) from exc
        except ValueError as exc:
            msg = "wikipedia: response is not JSON"
            raise DataFormatError(msg) from exc

        html = payload.get("parse", {}).get("text", "") if isinstance(payload, dict) else ""
        if not html:
            msg = "wikipedia: parse API returned no article HTML"
            raise DataFormatError(msg)
        return str(html)

    # -- parsing ------------------------------------------------------------

    def fetch_roster(self) -> list[RosterEntry]:
        """Fetch and parse the Division I roster."""
        return self.parse_html(self.fetch_html())

    def parse_html(self, html: str) -> list[RosterEntry]:
        """Scrape roster entries out of article HTML.

        Raises:
            DataFormatError: If the HTML holds no usable ``wikitable``.
        """
        try:
            tables = pd.read_html(StringIO(html), attrs={"class": "wikitable"}, flavor="lxml")
        except ValueError as exc:
            msg = "wikipedia: no wikitable found in article HTML"
            raise DataFormatError(msg) from exc

        unique: dict[tuple[str, str, str], None] = {}
        for table in tables:
            for team, conf in _team_conference_rows(table):
                school, nickname = split_team_name(team)
                unique.setdefault((school, nickname, normalise_conference(conf)), None)

        if not unique:
            msg = "wikipedia: no table with team and conference columns"
            raise DataFormatError(msg)
        if len(unique) < MIN_EXPECTED_TEAMS:
            logger.warning("wikipedia: low team count parsed: %d", len(unique))

        rng = np.random.default_rng(self._jitter_seed)
        jitters = rng.integers(-RATING_JITTER, RATING_JITTER + 1, size=len(unique))
        entries = [
            RosterEntry(
                team_id=idx,
                school=school,
                nickname=nickname,
                conference=conf,
                rating=clamp_rating(CONF_AVG_RATING.get(conf, DEFAULT_CONF_RATING) + int(jitter)),
            )
            for idx, ((school, nickname, conf), jitter) in enumerate(zip(unique, jitters))
        ]
        logger.info("wikipedia: loaded %d teams", len(entries))
        return entries


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


def normalise_conference(label: str) -> str:
    """Map a scraped conference label onto the canonical short label.

    Exact alias patterns are tried first, then a fuzzy token-set match
    against :data:`CONF_AVG_RATING`.  Unmatched labels are returned cleaned
    but otherwise unchanged.
    """
    conf = re.sub(r"\s+", " ", label).strip()
    conf = re.sub(r"^The\s+", "", conf, flags=re.IGNORECASE)
    for pattern, canonical in _CONF_ALIASES:
        if pattern.match(conf):
            return canonical
    if conf in CONF_AVG_RATING:
        return conf
    match = process.extractOne(conf, list(CONF_AVG_RATING), scorer=fuzz.token_set_ratio, score_cutoff=_FUZZY_THRESHOLD)
    if match is not None:
        return str(match[0])
    return conf


def split_team_name(team: str) -> tuple[str, str]:
    """Split ``"Duke Blue Devils"`` into ``("Duke", "Blue Devils")``.

    Unrecognised nicknames leave the whole name as the school.
    """
    parts = team.split()
    if len(parts) >= 3 and " ".join(parts[-2:]) in _TWO_WORD_NICKNAMES:
        return " ".join(parts[:-2]), " ".join(parts[-2:])
    if len(parts) >= 2 and parts[-1].lower() in _NICKNAMES:
        return " ".join(parts[:-1]), parts[-1]
    return team, ""


def _clean_cell(value: object) -> str:
    if not isinstance(value, str):
        return ""
    # \s also matches the non-breaking spaces Wikipedia uses inside names.
    return re.sub(r"\s+", " ", _FOOTNOTE.sub("", value)).strip()


def _team_conference_rows(table: pd.DataFrame) -> list[tuple[str, str]]:
    """Return ``(team, conference)`` pairs from one scraped table."""
    headers = [
        " ".join(str(c) for c in col).lower() if isinstance(col, tuple) else str(col).lower()
        for col in table.columns
    ]
    # "Team" holds "School Nickname"; "School" is often the institution's full name.
    team_idx = next((i for i, h in enumerate(headers) if "team" in h), None)
    if team_idx is None:
        team_idx = next((i for i, h in enumerate(headers) if "school" in h), None)
    conf_idx = next((i for i, h in enumerate(headers) if h.strip() == "conference"), None)
    if conf_idx is None:
        conf_idx = next((i for i, h in enumerate(headers) if "conference" in h), None)
    if team_idx is None or conf_idx is None:
        return []

    rows: list[tuple[str, str]] = []
    for team_raw, conf_raw in zip(table.iloc[:, team_idx], table.iloc[:, conf_idx]):
        team = _clean_cell(team_raw)
        conf = _clean_cell(conf_raw)
        if team and conf:
            rows.append((team, conf))
    return rows
