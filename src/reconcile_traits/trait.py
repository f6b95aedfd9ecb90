"""Trait protocol and shared base class."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from reconcile_traits.environment import Environment

__all__ = ["BaseTrait", "Trait", "TraitConfig"]


@dataclass(frozen=True)
class TraitConfig:
    """User-facing switches for a single trait.

    ``None`` means the user did not say anything. It is never an opt-in.
    """

    enabled: bool | None = None
    auto: bool | None = None


@runtime_checkable
class Trait(Protocol):
    """Interface every trait implements.

    ``applies_to`` must only look at the resource variants and their phases,
    so it answers the same for an unchanged environment. ``apply`` raises
    :class:`~reconcile_traits.errors.ApplyError` when it cannot finish.
    """

    id: str

    @property
    def enabled(self) -> bool | None:
        """Return the raw enablement flag, None when the user left it unset."""
        ...

    def is_auto(self) -> bool:
        """Return True if the trait activates without explicit enablement."""
        ...

    def is_enabled(self) -> bool:
        """Return True if the user explicitly enabled the trait."""
        ...

    def applies_to(self, env: Environment) -> bool:
        """Return True if the trait has work to do in the current phase."""
        ...

    def apply(self, env: Environment) -> None:
        """Mutate the environment for the current phase."""
        ...


class BaseTrait:
    """Common id/config handling. Subclasses provide the phase logic."""

    #: False for traits whose automatic activation is fixed by the trait itself.
    auto_configurable = True

    def __init__(self, trait_id: str, config: TraitConfig | None = None) -> None:
        self.id = trait_id
        self.config = config or TraitConfig()

    @property
    def enabled(self) -> bool | None:
        return self.config.enabled

    def is_auto(self) -> bool:
        return bool(self.config.auto)

    def is_enabled(self) -> bool:
        if self.config.enabled is None:
            return False
        return self.config.enabled

    def applies_to(self, env: Environment) -> bool:
        return False

    def apply(self, env: Environment) -> None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, enabled={self.config.enabled!r})"
