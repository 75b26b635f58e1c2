"""Chappe CLI Main Entry Point

Chappe builds documentation resources (Markdown, API Blueprint) into static
assets. This CLI resolves the build context and hands the requested action
to the build pipeline.

Usage:
    chappe                          # Build with default context
    chappe <action>                 # clean, build, lint or watch
    chappe --example acme-docs      # Use an example's context
    chappe --config a.json,b.json   # Override context values
    chappe --quiet                  # No banner or context dump
    chappe --help                   # Show this help
    chappe --version                # Show version
"""

from __future__ import annotations

from typing import List, Optional

import click
import typer
from typer.core import TyperCommand

from ._version import __version__
from .commands import run_command
from .commands.utils import setup_logging
from .lib.actions import ACTIONS_AVAILABLE
from .lib.profiles import builtin_profiles


def _defaults_to(name: str) -> str:
    return f"(defaults to: '{getattr(builtin_profiles().default, name)}')"


class RawTokensCommand(TyperCommand):
    """Keeps the unparsed command-line tokens in ctx.meta["tokens"].

    Actions are picked from every token, so `chappe --dist out lint` and
    `chappe lint --dist out` select the same action.
    """

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.meta["tokens"] = list(args)
        return super().parse_args(ctx, args)


typer_app = typer.Typer(add_completion=False)


@typer_app.command(
    cls=RawTokensCommand,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
    epilog="Available actions: "
    + ", ".join(action.value for action in ACTIONS_AVAILABLE)
)
def cli(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    quiet: bool = typer.Option(
        False, "--quiet", help="Do not print the banner and context."
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress logs."),
    example: Optional[str] = typer.Option(
        None, "--example", help="Use the context of a bundled example."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", help=f"Config file(s), comma-separated {_defaults_to('config')}"
    ),
    assets: Optional[str] = typer.Option(
        None, "--assets", help=f"Assets directory {_defaults_to('assets')}"
    ),
    data: Optional[str] = typer.Option(
        None, "--data", help=f"Data directory {_defaults_to('data')}"
    ),
    dist: Optional[str] = typer.Option(
        None, "--dist", help=f"Output directory {_defaults_to('dist')}"
    ),
    temp: Optional[str] = typer.Option(
        None, "--temp", help=f"Temporary directory {_defaults_to('temp')}"
    ),
    env: Optional[str] = typer.Option(
        None,
        "--env",
        help=f"Environment, development or production {_defaults_to('env')}",
    ),
    pipeline: Optional[str] = typer.Option(
        None,
        "--pipeline",
        help="Build pipeline as 'module:attribute' (or set CHAPPE_PIPELINE).",
    ),
    args: Optional[List[str]] = typer.Argument(
        None, metavar="ACTION", help="Action to run (defaults to build)."
    ),
) -> None:
    """Builds given Chappe documentation resources into static assets."""
    if version:
        typer.echo(f"Chappe CLI v{__version__}")
        raise typer.Exit()

    setup_logging(verbose)

    run_command(
        tokens=ctx.meta.get("tokens", []),
        overrides={
            "config": config,
            "assets": assets,
            "data": data,
            "dist": dist,
            "temp": temp,
            "env": env,
        },
        example=example,
        quiet=quiet,
        pipeline_ref=pipeline,
    )


def app() -> None:
    """Entry point for the CLI."""
    # NOTE: Typer runs via Click under the hood and handles sys.exit codes for us.
    typer_app()


if __name__ == "__main__":
    app()
