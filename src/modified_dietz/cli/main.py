"""Modified Dietz CLI — main entry point."""

import logging

import typer

from .commands import calc, config_cmd

app = typer.Typer(
    name="mdietz",
    help="Modified Dietz rate of return for a single period",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Negative market values must parse as arguments, not options
app.command("calc", context_settings={"ignore_unknown_options": True})(calc.calc)
app.add_typer(config_cmd.app, name="config", help="Show or change defaults")


@app.callback()
def startup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log calculation details to stderr"),
):
    """Configure logging before any command runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


if __name__ == "__main__":
    app()
