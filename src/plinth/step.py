"""Build step ABC and step type registration."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from .context import BuildContext

P = TypeVar("P")

_step_registry: dict[str, type] = {}


def step(name: str):
    """Register a Step class under the block name used in build descriptors."""

    def decorator(cls):
        _step_registry[name] = cls
        return cls

    return decorator


class Step(ABC, Generic[P]):
    """Base class for a unit of build work."""

    @abstractmethod
    def up_to_date(self, ctx: BuildContext[P]) -> bool:
        """Outputs already match what execute would produce."""

    def exists(self, ctx: BuildContext[P]) -> bool:
        """Outputs are present (defaults to up_to_date)."""
        return self.up_to_date(ctx)

    @abstractmethod
    def execute(self, ctx: BuildContext[P]) -> None:
        """Produce the outputs."""

    @abstractmethod
    def clean(self, ctx: BuildContext[P]) -> None:
        """Remove the outputs."""

    def describe(self) -> str:
        return type(self).__name__
