"""Exception types raised by reconcile-traits."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

__all__ = ["ApplyError", "ConfigValidationError", "StepError"]


class ApplyError(RuntimeError):
    """Raised when a trait cannot complete its mutation of the environment.

    Any ApplyError aborts the remaining traits of the current pass. Mutations
    already made stay in the environment, which must then be discarded.
    """

    def __init__(self, trait_id: str, message: str) -> None:
        self.trait_id = trait_id
        super().__init__(f"trait '{trait_id}': {message}")


class StepError(RuntimeError):
    """Raised by the builder when a build step action fails."""

    def __init__(self, name: str, phase: int, message: str) -> None:
        self.name = name
        self.phase = phase
        super().__init__(f"step '{name}' (phase {phase}) failed: {message}")


class ConfigValidationError(ValueError):
    """Raised when a configuration or resource file fails validation."""

    def __init__(self, path: Path, errors: Iterable[str]) -> None:
        self.path = path
        self.errors = [error for error in errors if error]
        details = "\n".join(f"- {error}" for error in self.errors)
        message = f"Invalid file: {path}"
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)
