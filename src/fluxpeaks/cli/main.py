from __future__ import annotations

import typer

from .base import configure_logging
from .commands.analyze import analyze_command

configure_logging()
app = typer.Typer(
    help="Spectral-flux onset detection CLI",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("analyze")(analyze_command)


@app.callback()
def _root() -> None:
    """Spectral-flux onset detection."""


def main() -> None:
    """Main entry point for package CLI.

    Invokes the Typer application, which handles command parsing and
    execution.
    """
    app()


if __name__ == "__main__":
    main()
