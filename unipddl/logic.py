"""Logical connectives, quantifiers, equality and derived predicates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional

from .condition import Condition, Ground, Lifted, ParamCond
from .tokens import TokenStruct, tabindent

if TYPE_CHECKING:
    from .filereader import Filereader


def _parse_optional(f: Filereader, ts: TokenStruct[str], domain: Any) -> Optional[Condition]:
    """Read ``( ... )`` and return the condition inside, or None for ``()``."""
    f.next()
    f.assert_token("(")
    if f.get_char() == ")":
        f.col += 1
        return None
    cond = domain.create_condition(f)
    cond.parse(f, ts, domain)
    return cond


def _pddl_optional(cond: Optional[Condition], indent: int, ts: TokenStruct[str], domain: Any) -> str:
    if cond is None:
        return tabindent(indent) + "()"
    return cond.pddl(indent, ts, domain)


def _copy_optional(cond: Optional[Condition], domain: Any) -> Optional[Condition]:
    return cond.copy(domain) if cond is not None else None


def _pddl_list(keyword: str, conds: list[Condition], indent: int, ts: TokenStruct[str], domain: Any) -> str:
    out = tabindent(indent) + f"( {keyword}\n"
    for cond in conds:
        out += cond.pddl(indent + 1, ts, domain) + "\n"
    return out + tabindent(indent) + ")"


def _parse_list(conds: list[Condition], f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
    f.next()
    while f.get_char() != ")":
        f.assert_token("(")
        cond = domain.create_condition(f)
        cond.parse(f, ts, domain)
        conds.append(cond)
        f.next()
    f.col += 1


def _pddl_quantifier(
    keyword: str, quant: ParamCond, cond: Optional[Condition], indent: int, ts: TokenStruct[str], domain: Any
) -> str:
    scope = ts.copy()
    out = tabindent(indent) + f"( {keyword}\n"
    out += tabindent(indent + 1) + quant.print_params(0, scope, domain)
    out += _pddl_optional(cond, indent + 1, scope, domain)
    return out + "\n" + tabindent(indent) + ")"


def _parse_quantifier(
    quant: ParamCond, f: Filereader, ts: TokenStruct[str], domain: Any
) -> Optional[Condition]:
    """Parse the bound variables into ``quant.params`` and return the inner condition."""
    f.next()
    f.assert_token("(")
    bound = f.parse_typed_list(True, domain.types)
    quant.params = domain.convert_types(bound.types)
    scope = ts.copy()
    scope.append(bound)
    cond = _parse_optional(f, scope, domain)
    f.next()
    f.assert_token(")")
    return cond


class Equals(Ground):
    """Equality between two variables in scope."""

    def __init__(self, params: Optional[Iterable[int]] = None) -> None:
        super().__init__(None, params, name="=")

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return tabindent(indent) + "( =" + "".join(" " + ts[p] for p in self.params) + " )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        self.params = []
        for _ in range(2):
            token = f.get_token()
            position = ts.index(token)
            if position < 0:
                f.token_exit(token)
            self.params.append(position)
            f.next()
        f.assert_token(")")

    def copy(self, domain: Any) -> Equals:
        return Equals(self.params)


class Not(Condition):
    """Negation of a single atom."""

    def __init__(self, cond: Optional[Ground] = None) -> None:
        self.cond = cond

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        inner = self.cond.pddl(0, ts, domain) if self.cond is not None else ""
        return tabindent(indent) + "( NOT " + inner + " )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        f.assert_token("(")
        cond = domain.create_condition(f)
        if not isinstance(cond, Ground):
            f.token_exit(f.get_token())
        self.cond = cond
        cond.parse(f, ts, domain)
        f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        if self.cond is not None:
            self.cond.add_params(m, n)

    def copy(self, domain: Any) -> Not:
        return Not(_copy_optional(self.cond, domain))


class And(Condition):
    """Conjunction of conditions."""

    def __init__(self, conds: Optional[Iterable[Condition]] = None) -> None:
        self.conds: list[Condition] = list(conds) if conds is not None else []

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return _pddl_list("AND", self.conds, indent, ts, domain)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        _parse_list(self.conds, f, ts, domain)

    def add(self, cond: Condition) -> None:
        """Append ``cond`` to the conjunction."""
        self.conds.append(cond)

    def add_params(self, m: int, n: int) -> None:
        for cond in self.conds:
            cond.add_params(m, n)

    def copy(self, domain: Any) -> And:
        return And(cond.copy(domain) for cond in self.conds)


class Oneof(Condition):
    """Non-deterministic choice of one of the conditions."""

    def __init__(self, conds: Optional[Iterable[Condition]] = None) -> None:
        self.conds: list[Condition] = list(conds) if conds is not None else []

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return _pddl_list("ONEOF", self.conds, indent, ts, domain)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        _parse_list(self.conds, f, ts, domain)

    def add(self, cond: Condition) -> None:
        """Append ``cond`` to the alternatives."""
        self.conds.append(cond)

    def add_params(self, m: int, n: int) -> None:
        for cond in self.conds:
            cond.add_params(m, n)

    def copy(self, domain: Any) -> Oneof:
        return Oneof(cond.copy(domain) for cond in self.conds)


class Or(Condition):
    """Disjunction of two conditions."""

    def __init__(self, first: Optional[Condition] = None, second: Optional[Condition] = None) -> None:
        self.first = first
        self.second = second

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return (
            tabindent(indent) + "( OR\n"
            + _pddl_optional(self.first, indent + 1, ts, domain) + "\n"
            + _pddl_optional(self.second, indent + 1, ts, domain) + "\n"
            + tabindent(indent) + ")"
        )

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        self.first = _parse_optional(f, ts, domain)
        self.second = _parse_optional(f, ts, domain)
        f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        for cond in (self.first, self.second):
            if cond is not None:
                cond.add_params(m, n)

    def copy(self, domain: Any) -> Or:
        return Or(_copy_optional(self.first, domain), _copy_optional(self.second, domain))


class When(Condition):
    """Conditional effect: ``cond`` holds when ``pars`` does."""

    def __init__(self, pars: Optional[Condition] = None, cond: Optional[Condition] = None) -> None:
        self.pars = pars
        self.cond = cond

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return (
            tabindent(indent) + "( WHEN\n"
            + _pddl_optional(self.pars, indent + 1, ts, domain) + "\n"
            + _pddl_optional(self.cond, indent + 1, ts, domain) + "\n"
            + tabindent(indent) + ")"
        )

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        self.pars = _parse_optional(f, ts, domain)
        self.cond = _parse_optional(f, ts, domain)
        f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        for cond in (self.pars, self.cond):
            if cond is not None:
                cond.add_params(m, n)

    def copy(self, domain: Any) -> When:
        return When(_copy_optional(self.pars, domain), _copy_optional(self.cond, domain))


class Exists(ParamCond):
    """Existential quantification over typed variables."""

    def __init__(self, params: Optional[Iterable[int]] = None, cond: Optional[Condition] = None) -> None:
        super().__init__("", params)
        self.cond = cond

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return _pddl_quantifier("EXISTS", self, self.cond, indent, ts, domain)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        self.cond = _parse_quantifier(self, f, ts, domain)

    def add_params(self, m: int, n: int) -> None:
        if self.cond is not None:
            self.cond.add_params(m, n)

    def copy(self, domain: Any) -> Exists:
        return Exists(self.params, _copy_optional(self.cond, domain))


class Forall(ParamCond):
    """Universal quantification over typed variables."""

    def __init__(self, params: Optional[Iterable[int]] = None, cond: Optional[Condition] = None) -> None:
        super().__init__("", params)
        self.cond = cond

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return _pddl_quantifier("FORALL", self, self.cond, indent, ts, domain)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        self.cond = _parse_quantifier(self, f, ts, domain)

    def add_params(self, m: int, n: int) -> None:
        if self.cond is not None:
            self.cond.add_params(m, n)

    def copy(self, domain: Any) -> Forall:
        return Forall(self.params, _copy_optional(self.cond, domain))


class Derived(Lifted):
    """A derived predicate defined by a condition over its parameters."""

    def __init__(
        self,
        name: str = "",
        params: Optional[Iterable[int]] = None,
        cond: Optional[Condition] = None,
        lifted: Optional[Lifted] = None,
    ) -> None:
        super().__init__(name, params)
        self.cond = cond
        self.lifted = lifted

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        scope = ts.copy()
        out = "( :DERIVED ( " + self.name
        for param in self.params:
            var = f"?{domain.types[param].get_name()}{len(scope)}"
            scope.insert(var)
            out += " " + var
            if domain.typed:
                out += " - " + domain.types[param].name
        out += " )\n"
        if self.cond is not None:
            out += self.cond.pddl(1, scope, domain)
        return out + "\n)\n"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        f.assert_token("(")
        self.name = f.get_token(domain.preds)
        scope = f.parse_typed_list(True, domain.types)
        self.params = domain.convert_types(scope.types)
        f.next()
        f.assert_token("(")
        self.cond = domain.create_condition(f)
        self.cond.parse(f, scope, domain)
        f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        self.params = [p + n if p >= m else p for p in self.params]

    def copy(self, domain: Any) -> Derived:
        lifted = domain.preds.get(self.name) if self.name in domain.preds else self.lifted
        return Derived(self.name, self.params, _copy_optional(self.cond, domain), lifted)