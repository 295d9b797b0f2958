from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    take: int = DEFAULT_PAGE_SIZE

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.take

    @classmethod
    def parse(cls, page: Any = None, take: Any = None, *, default_take: int = DEFAULT_PAGE_SIZE) -> "PageRequest":
        """Lenient parsing of query-string values: bad input falls back to defaults."""

        return cls(page=_positive_int(page, 1), take=min(_positive_int(take, default_take), MAX_PAGE_SIZE))


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T] = field(default_factory=list)
    page: int = 1
    take: int = DEFAULT_PAGE_SIZE


def _positive_int(value: Any, fallback: int) -> int:
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return fallback
    return parsed if parsed > 0 else fallback
