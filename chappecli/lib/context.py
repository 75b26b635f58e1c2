"""Build context resolution.

The context tells the pipeline where to read config, assets and data from,
where to write the build output, and which environment to build for. It is
resolved once per run from a profile plus the command-line overrides, and
is read-only afterwards.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .errors import ConfigurationError
from .profiles import (
    CONTEXT_KEYS,
    PATH_KEYS,
    ContextProfile,
    ProfileSet,
    builtin_profiles,
)

log = logging.getLogger(__name__)


class Environment(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


ENVIRONMENTS = tuple(env.value for env in Environment)


class ResolvedContext(BaseModel):
    """Final build context handed to the pipeline."""

    model_config = ConfigDict(frozen=True)

    config: str
    assets: str
    data: str
    dist: str
    temp: str
    env: Environment

    @property
    def config_files(self) -> list[str]:
        """Config file paths, in the order they were given."""
        return self.config.split(",")

    def as_dict(self) -> dict[str, str]:
        """Context as plain strings, in canonical key order."""
        values = self.model_dump(mode="json")
        return {key: values[key] for key in CONTEXT_KEYS}


def expand_path(path: str, base: str | Path) -> str:
    """Return path as-is if absolute, else joined onto base."""
    if os.path.isabs(path):
        return path
    return os.path.normpath(os.path.join(str(base), path))


def _select_profile(
    profiles: ProfileSet, example: Optional[str]
) -> ContextProfile:
    if not example:
        return profiles.default

    profile = profiles.get_example(example)
    if profile is None:
        raise ConfigurationError(
            "Defaults could not be acquired. Did you specify a non-existing example?"
        )
    return profile


def resolve_context(
    overrides: Mapping[str, Optional[str]],
    example: Optional[str] = None,
    base_dir: str | Path | None = None,
    profiles: Optional[ProfileSet] = None,
) -> ResolvedContext:
    """Merge overrides into a profile and normalize the result.

    Args:
        overrides: Values given on the command line, keyed by field name.
            Missing or empty values fall back to the profile.
        example: Name of an example profile to use instead of the default.
        base_dir: Base for relative paths. Defaults to the current directory.
        profiles: Profile set to pick from. Defaults to the built-in one.

    Raises:
        ConfigurationError: If the example does not exist or the environment
            is not recognized.
    """
    profiles = profiles or builtin_profiles()
    defaults = _select_profile(profiles, example)
    base = base_dir if base_dir is not None else os.getcwd()

    # Values are held as lists until paths are expanded; only config may
    # carry several entries.
    values: dict[str, list[str]] = {}
    for key in CONTEXT_KEYS:
        raw = overrides.get(key) or getattr(defaults, key)
        values[key] = raw.split(",") if key == "config" else [raw]

    for key in PATH_KEYS:
        values[key] = [expand_path(value, base) for value in values[key]]

    joined = {key: ",".join(parts) for key, parts in values.items()}

    if joined["env"] not in ENVIRONMENTS:
        raise ConfigurationError(f"Environment value not recognized: {joined['env']}")

    context = ResolvedContext(**joined)
    log.debug(f"Resolved context: {context.as_dict()}")
    return context
