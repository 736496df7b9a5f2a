import nox
from pathlib import Path

ROOT = Path(__file__).parent

@nox.session
def tests(session: nox.Session) -> None:
    """Run the test suite."""
    session.install("-e", ".[test]")
    session.run("pytest")

@nox.session
def smoke(session: nox.Session) -> None:
    """Ensure the package imports and the CLI parses in a clean environment."""
    session.install("-e", ".")
    session.run("python", "-c", "import omsim")
    session.run("omsim", "--help", silent=True)
