"""Declaration of the root package dlama."""

from dlama.app import app
from dlama.server import run

__all__ = ["app", "main"]


def main() -> None:
    """Run the application server."""
    run()
