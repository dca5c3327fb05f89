"""
================================================================================
Query Parameters
================================================================================

Query string parameters appended to page URLs by ``PageDriver.get``.

    >>> str(query("q", "selenium webdriver") & query("page", "2"))
    'q=selenium+webdriver&page=2'

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Iterator, Tuple, Union
from urllib.parse import quote_plus


class QueryParams:
    """Immutable, ordered list of name/value pairs."""

    __slots__ = ("_pairs",)

    def __init__(self, pairs: Tuple[Tuple[str, str], ...] = ()):
        self._pairs = tuple(pairs)

    def add(self, name_or_params: Union[str, "QueryParams"], value: str = None) -> "QueryParams":
        """Return new params with a pair, or another QueryParams, appended."""
        if isinstance(name_or_params, QueryParams):
            return QueryParams(self._pairs + name_or_params._pairs)
        if value is None:
            raise TypeError("a query parameter needs a value")
        return QueryParams(self._pairs + ((name_or_params, str(value)),))

    def __and__(self, other: "QueryParams") -> "QueryParams":
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self.add(other)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash(self._pairs)

    def __str__(self) -> str:
        return "&".join(f"{quote_plus(name)}={quote_plus(value)}" for name, value in self._pairs)

    def __repr__(self) -> str:
        return f"QueryParams({str(self)!r})"


def query(name: str, value: str) -> QueryParams:
    return QueryParams().add(name, value)


__all__ = [
    "QueryParams",
    "query",
]
