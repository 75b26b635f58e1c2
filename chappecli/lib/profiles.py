"""Context profiles for chappecli.

A profile is a named bundle of default values for the six context fields:
- config: one or more config files (comma-separated)
- assets, data, dist, temp: directories
- env: build environment (development or production)

Profiles ship with the package in profiles.yaml:
- default: used when no example is requested
- example: mapping of example name to profile, used with --example
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

# Canonical field order, also used when dumping a context
CONTEXT_KEYS = ("config", "assets", "data", "dist", "temp", "env")

# Fields holding filesystem paths (expanded to absolute on resolution)
PATH_KEYS = ("config", "assets", "data", "dist", "temp")


class ContextProfile(BaseModel):
    """Default values for one context."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    config: str = Field(description="Config file(s), comma-separated")
    assets: str = Field(description="Assets directory")
    data: str = Field(description="Data directory")
    dist: str = Field(description="Output directory")
    temp: str = Field(description="Temporary build directory")
    env: str = Field(description="Build environment")


class ProfileSet(BaseModel):
    """All profiles known to the CLI."""

    model_config = ConfigDict(frozen=True)

    default: ContextProfile
    example: dict[str, ContextProfile] = Field(default_factory=dict)

    def get_example(self, name: str) -> ContextProfile | None:
        return self.example.get(name)


def load_profiles(path: Path) -> ProfileSet:
    """Load a profiles YAML file from path."""
    if not path.exists():
        raise FileNotFoundError(f"Profiles file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return ProfileSet.model_validate(data)


@lru_cache(maxsize=1)
def builtin_profiles() -> ProfileSet:
    """Return the profiles packaged with chappecli."""
    source = resources.files("chappecli").joinpath("profiles.yaml")
    with resources.as_file(source) as path:
        return load_profiles(path)
