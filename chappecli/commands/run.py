"""Run command - run one action against the build pipeline"""

from __future__ import annotations

from typing import Optional, Sequence

import typer

from chappecli.lib.orchestrator import TaskOrchestrator
from chappecli.lib.pipeline import Pipeline

from .utils import console


def run_command(
    tokens: Sequence[str],
    overrides: dict[str, Optional[str]],
    example: Optional[str] = None,
    quiet: bool = False,
    pipeline: Optional[Pipeline] = None,
    pipeline_ref: Optional[str] = None,
) -> None:
    """Run the action named in tokens and exit with its code."""
    orchestrator = TaskOrchestrator(
        console=console,
        pipeline=pipeline,
        pipeline_ref=pipeline_ref,
        quiet=quiet,
    )

    try:
        code = orchestrator.run(tokens, overrides, example)
    except KeyboardInterrupt:
        orchestrator.reporter.close()
        code = 130

    raise typer.Exit(code=code)
