"""
toptuinen CLI - Main Entry Point

Unified Typer CLI that assembles all module sub-commands.

Usage:
    toptuinen version
    toptuinen calc [command]
"""

import typer

import toptuinen

app = typer.Typer(
    name="toptuinen",
    help="Voorcalculatie en nacalculatie voor hoveniersprojecten.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only show warnings and errors"),
):
    """Voorcalculatie en nacalculatie voor hoveniersprojecten."""
    from toptuinen.core.logging import set_log_level

    if verbose:
        set_log_level("DEBUG")
    elif quiet:
        set_log_level("WARNING")


@app.command()
def version():
    """Show toptuinen version."""
    typer.echo(f"toptuinen {toptuinen.__version__}")


def _register_modules():
    """Register module CLI sub-apps. A module that fails to import is logged and skipped."""
    module_registry = [
        ("toptuinen.calculatie.cli", "calc", "Voorcalculatie, nacalculatie & forecasts"),
    ]

    for module_path, name, help_text in module_registry:
        try:
            import importlib

            mod = importlib.import_module(module_path)
            app.add_typer(mod.app, name=name, help=help_text)
        except (ImportError, AttributeError) as exc:
            from toptuinen.core.logging import get_logger

            get_logger("toptuinen.cli").warning(
                "Skipping %s commands: cannot load %s (%s)", name, module_path, exc
            )


_register_modules()


def main():
    """Entry point for the toptuinen CLI."""
    app()


if __name__ == "__main__":
    main()
