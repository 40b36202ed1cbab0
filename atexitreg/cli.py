"""
Typer CLI for atexitreg.

Commands: demo, config, version. Entrypoint: main() for console script atexitreg.cli:main.
"""
import json
import logging
from dataclasses import asdict

import typer
from typer import Exit

from atexitreg._registry import ON_ERROR_CHOICES, ON_ERROR_RAISE, ExitRegistry
from atexitreg.config import load_config
from atexitreg.version import version as __version__

EXIT_INTERNAL = 10

app = typer.Typer(help="atexitreg CLI: run the exit-processing demo or show configuration.")


@app.callback()
def _root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log registry activity to stderr"),
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")


def cleanup(*args: object) -> None:
    typer.echo(f"cleanup() executing: args = {' '.join(str(a) for a in args)}")


def failing(*args: object) -> None:
    typer.echo(f"failing() executing: args = {' '.join(str(a) for a in args)}")
    raise RuntimeError("failing() exit callback raised")


def weird(registry: ExitRegistry, *args: object) -> None:
    """Exit callback that tries to register another callback while exit processing runs."""
    typer.echo(f"weird() executing: args = {' '.join(str(a) for a in args)}")
    typer.echo("\tcalling register() during exit processing:")
    handle = registry.register(cleanup, "This call was registered during exit processing")
    typer.echo(f"\tregister() returned {handle}")


@app.command("demo")
def demo_cmd(
    allow_during_drain: bool = typer.Option(
        False, "--allow-during-drain", help="Accept register() calls made while exit callbacks run"
    ),
    on_error: str | None = typer.Option(
        None, "--on-error", help="Add a failing callback and handle it with this policy: raise or log"
    ),
) -> None:
    """Register a few callbacks on a private registry, remove one, then run exit processing."""
    if on_error is not None and on_error not in ON_ERROR_CHOICES:
        typer.echo(f"error: --on-error must be one of {', '.join(ON_ERROR_CHOICES)}", err=True)
        raise Exit(EXIT_INTERNAL)
    registry = ExitRegistry(ignore_during_drain=not allow_during_drain, on_error=on_error or ON_ERROR_RAISE)

    handle = registry.register(cleanup, "This call was registered first")
    typer.echo(f"first call to register() returned {handle}")

    if on_error is not None:
        handle = registry.register(failing, "This call raises during exit processing")
        typer.echo(f"failing call to register() returned {handle}")

    handle = registry.register("cleanup", "This call was registered second")
    typer.echo(f"second call to register() returned {handle}")

    handle = registry.register(weird, registry, "This call was registered third")
    typer.echo(f"third call to register() returned {handle}")

    handle = registry.register("cleanup", "This call should have been unregistered by unregister")
    if not registry.unregister(handle):
        typer.echo("couldn't unregister exit callback!", err=True)

    typer.echo("*** Now performing program-exit processing ***")
    try:
        registry.drain()
    except Exception as e:
        typer.echo(f"error: {e}", err=True)
        raise Exit(EXIT_INTERNAL)


@app.command("config")
def config_cmd(
    json_out: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Show the effective configuration for the process-wide registry."""
    config = load_config()
    if json_out:
        print(json.dumps(asdict(config), ensure_ascii=False))
    else:
        for key, value in asdict(config).items():
            typer.echo(f"{key}: {value}")


@app.command("version")
def version_cmd() -> None:
    """Print the atexitreg version."""
    typer.echo(__version__)


def main() -> None:
    """CLI entrypoint (console script atexitreg.cli:main)."""
    app()


if __name__ == "__main__":
    main()
