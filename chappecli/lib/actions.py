"""Build actions and how they are picked from the command line."""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class Action(str, Enum):
    CLEAN = "clean"
    BUILD = "build"
    LINT = "lint"
    WATCH = "watch"


# Lookup order when several action names are present
ACTIONS_AVAILABLE: tuple[Action, ...] = (
    Action.CLEAN,
    Action.BUILD,
    Action.LINT,
    Action.WATCH,
)

DEFAULT_ACTION = Action.BUILD

# Actions that run long enough to need the pipeline's subtask events printed
ACTIONS_LOGGING: frozenset[Action] = frozenset({Action.WATCH})


def select_action(tokens: Iterable[str]) -> Action:
    """Pick the action named anywhere in tokens.

    The first action in ACTIONS_AVAILABLE order that appears among the tokens
    wins, wherever it sits. Falls back to DEFAULT_ACTION.
    """
    present = set(tokens)
    for action in ACTIONS_AVAILABLE:
        if action.value in present:
            return action
    return DEFAULT_ACTION


def is_logging_action(action: Action) -> bool:
    return action in ACTIONS_LOGGING
