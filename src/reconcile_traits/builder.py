"""Build step registry and the reference builder that consumes it.

Traits never execute steps. They append steps to, or replace steps in, the
registry owned by the pass environment. Once all traits have run the
builder sorts the registry by phase (stable, so insertion order breaks
ties) and executes each step in turn. The first failing step fails the
whole build.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from reconcile_traits.errors import StepError

if TYPE_CHECKING:
    from reconcile_traits.environment import Environment

__all__ = [
    "APPLICATION_PACKAGE_PHASE",
    "APPLICATION_PUBLISH_PHASE",
    "INIT_PHASE",
    "NAMED_PHASES",
    "PROJECT_BUILD_PHASE",
    "PROJECT_GENERATION_PHASE",
    "BuildStep",
    "StepAction",
    "StepRegistry",
    "build",
    "phase_after",
]

log = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Phase scale
# ---------------------------------------------------------------------------

INIT_PHASE = 0
PROJECT_GENERATION_PHASE = 10
PROJECT_BUILD_PHASE = 20
APPLICATION_PACKAGE_PHASE = 30
APPLICATION_PUBLISH_PHASE = 40

NAMED_PHASES: tuple[int, ...] = (
    INIT_PHASE,
    PROJECT_GENERATION_PHASE,
    PROJECT_BUILD_PHASE,
    APPLICATION_PACKAGE_PHASE,
    APPLICATION_PUBLISH_PHASE,
)


def phase_after(phase: int) -> int:
    """Return a phase that runs right after *phase* and before the next named one.

    Raises:
        ValueError: If *phase* is not one of the named phases, or if the
            scale leaves no room between it and the next named phase.
    """
    if phase not in NAMED_PHASES:
        msg = f"Unknown build phase: {phase}"
        raise ValueError(msg)
    candidate = phase + 1
    later = [p for p in NAMED_PHASES if p > phase]
    if later and candidate >= min(later):
        msg = f"No room between build phase {phase} and {min(later)}"
        raise ValueError(msg)
    return candidate


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

StepAction = Callable[["Environment"], None]


@dataclass(frozen=True)
class BuildStep:
    """A named unit of work placed at a position on the phase scale."""

    name: str
    phase: int
    action: StepAction


class StepRegistry:
    """Ordered, mutable sequence of build steps."""

    def __init__(self, steps: list[BuildStep] | None = None) -> None:
        self._steps: list[BuildStep] = list(steps or [])

    def append(self, step: BuildStep) -> None:
        self._steps.append(step)

    def replace_at_phase(self, phase: int, step: BuildStep) -> bool:
        """Replace the first step sitting at *phase* with *step*.

        Later steps at the same phase are left alone. Nothing happens when no
        step occupies *phase*; callers that need the step regardless must use
        :meth:`append`.

        Returns:
            True if a step was replaced.
        """
        for index, current in enumerate(self._steps):
            if current.phase == phase:
                self._steps[index] = step
                return True
        return False

    def at_phase(self, phase: int) -> list[BuildStep]:
        return [step for step in self._steps if step.phase == phase]

    def ordered(self) -> list[BuildStep]:
        """Return the steps in execution order (stable sort by phase)."""
        return sorted(self._steps, key=lambda step: step.phase)

    def names(self) -> list[str]:
        return [step.name for step in self._steps]

    def contains(self, name: str) -> bool:
        return any(step.name == name for step in self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[BuildStep]:
        return iter(list(self._steps))

    def __getitem__(self, index: int) -> BuildStep:
        return self._steps[index]

    def __repr__(self) -> str:
        return f"StepRegistry({self.names()!r})"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build(env: Environment) -> list[str]:
    """Execute the environment's steps in phase order.

    Returns:
        Names of the executed steps, in execution order.

    Raises:
        StepError: If a step action raises. Steps after it are not run.
    """
    executed: list[str] = []
    for step in env.steps.ordered():
        log.info("Running build step %s (phase %d)", step.name, step.phase)
        try:
            step.action(env)
        except StepError:
            raise
        except Exception as exc:
            log.error("Build step %s failed: %s", step.name, exc)
            raise StepError(step.name, step.phase, str(exc)) from exc
        executed.append(step.name)
    return executed
