"""Base conditions and the parameterised predicate, function and ground atoms."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Optional

from .tokens import TokenStruct, tabindent

if TYPE_CHECKING:
    from .filereader import Filereader


def _format_list(values: Iterable[Any]) -> str:
    return "[" + ",".join(str(v) for v in values) + "]"


class Condition(ABC):
    """A node of a PDDL condition or effect tree."""

    @abstractmethod
    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        """Return the PDDL text of this node."""

    @abstractmethod
    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        """Read this node from ``f``; ``ts`` holds the variables in scope."""

    @abstractmethod
    def add_params(self, m: int, n: int) -> None:
        """Shift parameter references at or above ``m`` by ``n``."""

    @abstractmethod
    def copy(self, domain: Any) -> Condition:
        """Return a deep copy bound to ``domain``."""


class ParamCond(Condition):
    """A condition with a name and a list of integer parameters."""

    def __init__(self, name: str = "", params: Optional[Iterable[int]] = None) -> None:
        self.name = name
        self.params: list[int] = list(params) if params is not None else []

    def __str__(self) -> str:
        return f"{self.name}{_format_list(self.params)}"

    def print_params(self, first: int, ts: TokenStruct[str], domain: Any) -> str:
        """Name the parameters from ``first`` on, add them to ``ts`` and return the list."""
        out = "("
        for param in self.params[first:]:
            var = f"?{domain.types[param].get_name()}{len(ts)}"
            ts.insert(var)
            out += " " + var
            if domain.typed:
                out += " - " + domain.types[param].name
        return out + " )\n"


class Lifted(ParamCond):
    """A predicate declaration whose parameters are type indices."""

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        out = tabindent(indent) + "( " + self.name
        for i, param in enumerate(self.params):
            if len(ts):
                out += ts[i]
            else:
                out += f" ?{domain.types[param].get_name()}{i}"
            if domain.typed:
                out += " - " + domain.types[param].name
        return out + " )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        lstruct = f.parse_typed_list(True, domain.types)
        self.params = domain.convert_types(lstruct.types)

    def add_params(self, m: int, n: int) -> None:
        pass

    def copy(self, domain: Any) -> Lifted:
        return Lifted(self.name, self.params)


class Function(Lifted):
    """A function declaration; ``return_type`` is -1 for numeric functions."""

    def __init__(self, name: str = "", return_type: int = -1, params: Optional[Iterable[int]] = None) -> None:
        super().__init__(name, params)
        self.return_type = return_type

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        out = super().pddl(indent, ts, domain)
        if self.return_type >= 0:
            out += " - " + domain.types[self.return_type].name
        return out

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        super().parse(f, ts, domain)
        f.next()
        if f.get_char() == "-":
            f.assert_token("-")
            token = f.get_token()
            if token != "NUMBER":
                f.col -= len(token)
                self.return_type = domain.types.index(f.get_token(domain.types))

    def copy(self, domain: Any) -> Function:
        return Function(self.name, self.return_type, self.params)


class Ground(ParamCond):
    """An atom over a lifted predicate.

    Parameters that are 0 or more refer to variables in scope; negative ones
    refer to constants of the parameter's type.
    """

    def __init__(
        self,
        lifted: Optional[Lifted] = None,
        params: Optional[Iterable[int]] = None,
        *,
        name: Optional[str] = None,
    ) -> None:
        if name is None:
            name = lifted.name if lifted is not None else ""
        super().__init__(name, params)
        self.lifted = lifted

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        out = tabindent(indent) + "( " + self.name
        for i, param in enumerate(self.params):
            if len(ts) and 0 <= param < len(ts):
                out += " " + ts[param]
            elif param >= 0:
                out += f" ?{param}"
            else:
                out += " " + domain.types[self.lifted.params[i]].object(param)[0]
        return out + " )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        self.params = []
        for type_index in self.lifted.params:
            token = f.get_token()
            position = ts.index(token)
            if position >= 0:
                self.params.append(position)
            else:
                found, value = domain.types[type_index].parse_constant(token)
                if not found:
                    f.token_exit(token)
                self.params.append(value)
            f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        self.params = [p + n if p >= m else p for p in self.params]

    def copy(self, domain: Any) -> Ground:
        lifted = domain.preds.get(self.name) if self.name in domain.preds else self.lifted
        return Ground(lifted, self.params, name=self.name)


class Task(ParamCond):
    """A named task with parameters; it has no PDDL text of its own."""

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return ""

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        pass

    def add_params(self, m: int, n: int) -> None:
        pass

    def copy(self, domain: Any) -> Task:
        return Task(self.name, self.params)