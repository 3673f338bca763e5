"""Nox session management for the cbb-sim quality pipeline.

Running ``nox`` executes Ruff (lint/format) -> Mypy (type check) -> Pytest (tests).
``nox -s smoke`` runs only the fast structural tests; ``nox -s simulate``
plays a full seeded season from the bundled example roster.
"""

from __future__ import annotations

import nox

nox.options.sessions = ["lint", "typecheck", "tests"]

_EXAMPLE_ROSTER = "tests/fixtures/teams.csv"


@nox.session(python=False)
def lint(session: nox.Session) -> None:
    """Run Ruff linting with auto-fix and format checking."""
    session.run("ruff", "check", ".", "--fix")
    session.run("ruff", "format", "--check", ".")


@nox.session(python=False)
def typecheck(session: nox.Session) -> None:
    """Run mypy strict type checking on source and test files."""
    session.run("mypy", "--strict", "--show-error-codes", "src/cbb_sim", "tests")


@nox.session(python=False)
def tests(session: nox.Session) -> None:
    """Run the full pytest test suite (extra args are passed through)."""
    session.run("pytest", "--tb=short", *session.posargs)


@nox.session(python=False)
def smoke(session: nox.Session) -> None:
    """Run the smoke-marked tests only."""
    session.run("pytest", "-m", "smoke", "--tb=short")


@nox.session(python=False)
def simulate(session: nox.Session) -> None:
    """Play a whole season into a scratch directory."""
    data_dir = session.create_tmp()
    session.run(
        "cbb-sim", "--data-dir", data_dir, "run", "--csv", _EXAMPLE_ROSTER, "--seed", "2025-season"
    )
