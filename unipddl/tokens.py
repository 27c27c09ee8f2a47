"""Ordered, name-indexed token tables and small formatting helpers."""

from __future__ import annotations

from typing import Any, Generic, Iterable, Iterator, TypeVar

T = TypeVar("T")


def token_name(token: Any) -> str:
    """Return the lookup name of a token: strings are their own name."""
    return token if isinstance(token, str) else token.name


def tabindent(indent: int) -> str:
    """Return ``indent`` tab characters."""
    return "\t" * indent


def incvec(lo: int, hi: int) -> list[int]:
    """Return the integers from ``lo`` up to ``hi - 1``."""
    return list(range(lo, hi))


class TokenStruct(Generic[T]):
    """An ordered list of tokens with a name-to-position map.

    The ``types`` list holds the type names of a parsed typed list, aligned
    with ``tokens``. Inserting a name that is already present appends the
    token but keeps the position of the first occurrence in the map.
    """

    def __init__(self, tokens: Iterable[T] = ()) -> None:
        self.tokens: list[T] = []
        self.token_map: dict[str, int] = {}
        self.types: list[str] = []
        for token in tokens:
            self.insert(token)

    def __len__(self) -> int:
        return len(self.tokens)

    def __iter__(self) -> Iterator[T]:
        return iter(self.tokens)

    def __contains__(self, name: object) -> bool:
        return name in self.token_map

    def __getitem__(self, i: int) -> T:
        return self.tokens[i]

    def __setitem__(self, i: int, value: T) -> None:
        self.tokens[i] = value

    def __repr__(self) -> str:
        return f"TokenStruct({self.tokens!r}, types={self.types!r})"

    def append(self, other: TokenStruct[T]) -> None:
        """Insert every token of ``other`` and extend the type names."""
        for token in other.tokens:
            self.insert(token)
        self.types.extend(other.types)

    def insert(self, token: T) -> int:
        """Append ``token`` and return the position its name maps to."""
        position = self.token_map.setdefault(token_name(token), len(self.tokens))
        self.tokens.append(token)
        return position

    def index(self, name: str) -> int:
        """Return the position of ``name``, or -1 when it is absent."""
        return self.token_map.get(name, -1)

    def get(self, name: str) -> T:
        """Return the token called ``name``; raise KeyError if absent."""
        position = self.index(name)
        if position < 0:
            raise KeyError(name)
        return self.tokens[position]

    def clear(self) -> None:
        """Remove every token and name."""
        self.tokens.clear()
        self.token_map.clear()

    def copy(self) -> TokenStruct[T]:
        """Return a shallow copy with independent lists and map."""
        clone: TokenStruct[T] = TokenStruct()
        clone.tokens = list(self.tokens)
        clone.token_map = dict(self.token_map)
        clone.types = list(self.types)
        return clone