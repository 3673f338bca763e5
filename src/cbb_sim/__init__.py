"""cbb_sim: seeded college basketball season and tournament simulator."""

from __future__ import annotations

__version__ = "0.1.0"
