"""Failure types raised by detect-only check steps."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from doctag.validator import Violation


class StepFailure(RuntimeError):
    """A check step found one or more violations in a source text.

    The message lists every violation, one per line, in source order. The
    text itself is never modified by a failing step.
    """

    def __init__(self, violations: Sequence[Violation], *, path: str | None = None):
        self.violations: tuple[Violation, ...] = tuple(violations)
        self.path = path
        super().__init__("\n".join(v.render() for v in self.violations))


class MissingTagError(StepFailure):
    """One or more documentation blocks lack the required tag."""
