"""Ground facts over objects, and ground function values."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence

from .condition import Ground, Lifted
from .filereader import UnknownToken
from .tokens import TokenStruct, tabindent

if TYPE_CHECKING:
    from .filereader import Filereader

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _resolve(type_, name: str) -> Optional[int]:
    """Return the object index of ``name`` in ``type_``, else its constant index."""
    found, value = type_.parse_object(name)
    if found:
        return value
    found, value = type_.parse_constant(name)
    if found:
        return value
    return None


class TypeGround(Ground):
    """A fact whose parameters are objects (>= 0) or constants (< 0)."""

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        out = tabindent(indent) + "( " + self.name
        for type_index, param in zip(self.lifted.params, self.params):
            out += " " + domain.types[type_index].object(param)[0]
        return out + " )"

    def insert(self, domain: Any, values: Sequence[str]) -> None:
        """Set the parameters from object or constant names."""
        params = []
        for type_index, value in zip(self.lifted.params, values):
            index = _resolve(domain.types[type_index], value)
            if index is None:
                raise UnknownToken(value)
            params.append(index)
        self.params = params

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        self.params = []
        for type_index in self.lifted.params:
            token = f.get_token()
            index = _resolve(domain.types[type_index], token)
            if index is None:
                f.token_exit(token)
            self.params.append(index)
            f.next()
        f.assert_token(")")


class NumericGroundFunc(TypeGround):
    """A ground function with a numeric value."""

    def __init__(
        self,
        lifted: Optional[Lifted] = None,
        value: float = 0.0,
        params: Optional[Iterable[int]] = None,
    ) -> None:
        super().__init__(lifted, params)
        self.value = value

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        head = TypeGround.pddl(self, 0, ts, domain)
        return tabindent(indent) + f"( = {head} {int(self.value)} )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        super().parse(f, ts, domain)
        f.next()
        token = f.get_token()
        match = _NUMBER_RE.match(token)
        if match is None:
            f.token_exit(token)
        self.value = float(match.group())
        f.next()
        f.assert_token(")")


class ObjectGroundFunc(TypeGround):
    """A ground function whose value is an object or constant of its return type."""

    def __init__(
        self,
        lifted: Optional[Lifted] = None,
        value: int = 0,
        params: Optional[Iterable[int]] = None,
    ) -> None:
        super().__init__(lifted, params)
        self.value = value

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        head = TypeGround.pddl(self, 0, ts, domain)
        name, rest = domain.types[self.lifted.return_type].object(self.value)
        return tabindent(indent) + f"( = {head} ({name},{rest}) )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        super().parse(f, ts, domain)
        f.next()
        token = f.get_token()
        index = _resolve(domain.types[self.lifted.return_type], token)
        if index is None:
            f.token_exit(token)
        self.value = index
        f.next()
        f.assert_token(")")