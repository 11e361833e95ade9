import os
from pathlib import Path
import nox

# Reuse existing virtualenvs for faster runs
nox.options.reuse_existing_virtualenvs = True
# Default sessions when running "nox"
nox.options.sessions = ["lint", "tests"]

# Environment variables to propagate
PASSED_ENV_VARS = [
    "DATABASE_URL",
    "SECRET_KEY",
    "ENVIRONMENT",
    "LOG_LEVEL",
]


def _set_env(session):
    """
    Propagate database and test-related environment variables into the session.
    Also ensure the project root is on PYTHONPATH.
    """
    session.env["PYTHONPATH"] = str(Path.cwd())
    session.env.setdefault("ENVIRONMENT", "testing")
    for var in PASSED_ENV_VARS:
        if var in os.environ:
            session.env[var] = os.environ[var]


@nox.session(name="lint")
def lint(session):
    """
    Code formatting, linting, and type-checks:
      - isort
      - black
      - flake8
      - mypy
    """
    _set_env(session)
    session.install("isort", "black", "flake8", "mypy")
    session.run("isort", "mice/", "tests/")
    session.run("black", "mice/", "tests/")
    session.run("flake8", "mice/", "tests/")
    session.run("mypy", "mice/")


@nox.session(name="tests")
def tests(session):
    """
    Run the unit and integration suites against in-memory SQLite.
    Pass positional args to target specific tests.
    Usage:
      nox -s tests
      nox -s tests -- tests/unit/test_core/test_cache.py
    """
    _set_env(session)
    session.install("-e", ".[test]")
    targets = session.posargs or ["tests"]
    htmlcov_path = ".nox/htmlcov"
    session.run(
        "pytest",
        *targets,
        "-vv",
        "--tb=short",
        "--cov=mice",
        "--cov-report=term-missing",
        "--cov-report=html:" + htmlcov_path,
        "--cov-fail-under=80",
    )
