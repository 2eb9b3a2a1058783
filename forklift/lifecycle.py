from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from .errors import HarnessReleasedFailure

F = TypeVar("F", bound=Callable[..., Any])


def guarded(func: F) -> F:
    """Refuse to run `func` once the owning harness has been released.

    The check happens before any argument handling so a released harness
    never touches its workspace, the engine or the network. Stack under
    `@property` for accessors.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if getattr(self, "_released", False):
            raise HarnessReleasedFailure(func.__name__)
        return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
