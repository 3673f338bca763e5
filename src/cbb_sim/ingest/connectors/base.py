"""Abstract base class for roster connectors and shared exception hierarchy.

All concrete connectors (CSV file, Wikipedia, etc.) inherit from
:class:`Connector` and implement :meth:`Connector.fetch_roster`.  The
exception hierarchy gives callers one error contract across sources.

Row-level defects are not errors: a connector drops rows it cannot use
(no school, no conference) and keeps going.  Only problems with the source
as a whole raise.
"""

from __future__ import annotations

import abc

from cbb_sim.ingest.schema import RosterEntry

# ---------------------------------------------------------------------------
# Exception hierarchy
# ---------------------------------------------------------------------------


class ConnectorError(Exception):
    """Base exception for all connector errors."""


class DataFormatError(ConnectorError):
    """Source file or table does not have the expected columns."""


class NetworkError(ConnectorError):
    """Connection failure, timeout, or HTTP error."""


# ---------------------------------------------------------------------------
# Abstract Connector
# ---------------------------------------------------------------------------


class Connector(abc.ABC):
    """Abstract base class for roster sources."""

    @abc.abstractmethod
    def fetch_roster(self) -> list[RosterEntry]:
        """Return the roster, with team ids unique within the result."""
