"""Banner and context dump shown before a run."""

from __future__ import annotations

from importlib import resources
from typing import Mapping

from jinja2 import BaseLoader, Environment

from chappecli._version import __version__

from .actions import Action


def render_banner(version: str = __version__) -> str:
    """Render the packaged banner with the bundle name filled in."""
    template_str = resources.files("chappecli").joinpath("banner.txt").read_text()
    env = Environment(loader=BaseLoader(), autoescape=False, keep_trailing_newline=True)
    return env.from_string(template_str).render(bundle=f"Chappe v{version}")


def dump_context(context: Mapping[str, str]) -> str:
    """One ' key -> value' line per context field."""
    return "\n".join(f" {key} -> {value}" for key, value in context.items())


def describe_run(action: Action, context: Mapping[str, str]) -> str:
    return f"Chappe will {action.value} docs with context:\n{dump_context(context)}\n"
