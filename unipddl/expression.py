"""Numeric expressions and the function modifiers (increase/decrease)."""

from __future__ import annotations

import copy as _copy
import re
from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence, Union

from .condition import Condition, Ground, Lifted, ParamCond
from .tokens import TokenStruct, tabindent

if TYPE_CHECKING:
    from .filereader import Filereader

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_OPERATORS = frozenset({"+", "-", "*", "/"})


def _format_number(value: float) -> str:
    return format(value, "g")


class Expression(Condition):
    """A numeric expression that can be evaluated."""

    def __str__(self) -> str:
        return self.info()

    @abstractmethod
    def info(self) -> str:
        """Return a compact text description."""

    @abstractmethod
    def evaluate(self, instance: Any = None, par: Optional[Sequence[str]] = None) -> float:
        """Return the value, optionally within ``instance`` for object names ``par``."""

    @abstractmethod
    def param_set(self) -> set[int]:
        """Return the parameter indices the expression refers to."""

    def _operands(self) -> tuple[Expression, ...]:
        return ()

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        """Leaf expressions are fully read by :func:`create_expression`."""
        return None

    def add_params(self, m: int, n: int) -> None:
        """Shift variable references at or above ``m`` by ``n`` in sub-expressions."""
        for operand in self._operands():
            operand.add_params(m, n)


def create_expression(f: Filereader, ts: TokenStruct[str], domain: Any) -> Expression:
    """Read a number, ``?DURATION``, a function term or an arithmetic expression."""
    f.next()
    ch = f.get_char()
    if ch == "(":
        f.col += 1
        f.next()
        token = f.get_token()
        if token in _OPERATORS:
            composite = CompositeExpression(token)
            composite.parse(f, ts, domain)
            return composite
        f.col -= len(token)
        fun = domain.funcs.get(f.get_token(domain.funcs))
        term = Lifted(fun.name, fun.params)
        for i in range(len(fun.params)):
            f.next()
            term.params[i] = ts.index(f.get_token(ts))
        f.next()
        f.assert_token(")")
        return FunctionExpression(term)
    if ch == "?":
        f.assert_token("?DURATION")
        return DurationExpression()
    token = f.get_token()
    match = _NUMBER_RE.match(token)
    return ValueExpression(float(match.group()) if match else 0.0)


class CompositeExpression(Expression):
    """A binary arithmetic or comparison expression."""

    def __init__(self, op: str, left: Optional[Expression] = None, right: Optional[Expression] = None) -> None:
        self.op = op
        self.left = left
        self.right = right

    def _operands(self) -> tuple[Expression, ...]:
        return tuple(e for e in (self.left, self.right) if e is not None)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        self.left = create_expression(f, ts, domain)
        self.right = create_expression(f, ts, domain)
        f.next()
        f.assert_token(")")

    def info(self) -> str:
        return f"({self.op} {self.left.info()} {self.right.info()})"

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return (
            f"( {self.op} "
            + self.left.pddl(indent, ts, domain)
            + " "
            + self.right.pddl(indent, ts, domain)
            + " )"
        )

    def compute(self, x: float, y: float) -> float:
        """Apply the operator; division by zero and unknown operators give 0."""
        if self.op == "+":
            return x + y
        if self.op == "-":
            return x - y
        if self.op == "*":
            return x * y
        if self.op == "/":
            return 0 if y == 0 else x / y
        return 0

    def evaluate(self, instance: Any = None, par: Optional[Sequence[str]] = None) -> float:
        return self.compute(self.left.evaluate(instance, par), self.right.evaluate(instance, par))

    def param_set(self) -> set[int]:
        return self.left.param_set() | self.right.param_set()

    def copy(self, domain: Any) -> CompositeExpression:
        return CompositeExpression(self.op, self.left.copy(domain), self.right.copy(domain))


class FunctionExpression(Expression):
    """A function term whose parameters refer to variables or constants."""

    def __init__(self, fun: ParamCond) -> None:
        self.fun = fun

    def info(self) -> str:
        return "(" + self.fun.name + "[" + ",".join(str(p) for p in self.fun.params) + "])"

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        declared = domain.funcs.get(self.fun.name)
        out = "( " + self.fun.name
        for type_index, param in zip(declared.params, self.fun.params):
            if len(ts) and param >= 0:
                out += " " + ts[param]
            else:
                out += " " + domain.types[type_index].object(param)[0]
        return out + " )"

    def add_params(self, m: int, n: int) -> None:
        self.fun.params = [p + n if p >= m else p for p in self.fun.params]

    def evaluate(self, instance: Any = None, par: Optional[Sequence[str]] = None) -> float:
        """Look the term up in the initial state; 1 when it is not found."""
        if instance is None or par is None:
            return 1
        domain = instance.domain
        declared = domain.funcs.get(self.fun.name)
        values = []
        for type_index, param in zip(declared.params, self.fun.params):
            type_ = domain.types[type_index]
            name = par[param]
            found, index = type_.parse_object(name)
            if not found:
                found, index = type_.parse_constant(name)
                if not found:
                    return 1
            values.append(index)
        for fact in instance.init:
            if fact.name == declared.name and list(fact.params) == values:
                return fact.value
        return 1

    def param_set(self) -> set[int]:
        return set(self.fun.params)

    def copy(self, domain: Any) -> FunctionExpression:
        return FunctionExpression(self.fun.copy(domain))


class ValueExpression(Expression):
    """A numeric constant."""

    def __init__(self, value: float) -> None:
        self.value = value

    def info(self) -> str:
        return _format_number(self.value)

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return _format_number(self.value)

    def evaluate(self, instance: Any = None, par: Optional[Sequence[str]] = None) -> float:
        return self.value

    def param_set(self) -> set[int]:
        return set()

    def copy(self, domain: Any) -> ValueExpression:
        return ValueExpression(self.value)


class DurationExpression(Expression):
    """The ``?DURATION`` variable of a durative action."""

    def info(self) -> str:
        return "?DURATION"

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        return "?DURATION"

    def evaluate(self, instance: Any = None, par: Optional[Sequence[str]] = None) -> float:
        return -1

    def param_set(self) -> set[int]:
        return set()

    def copy(self, domain: Any) -> DurationExpression:
        return DurationExpression()


class FunctionModifier(Condition):
    """An effect that changes a function, or total cost, by an expression.

    ``value`` is either a number or a function declaration; in the latter
    case the modifier is that function applied to ``params``.
    """

    def __init__(
        self,
        name: str,
        value: Union[float, Lifted] = 1,
        params: Optional[Iterable[int]] = None,
    ) -> None:
        self.name = name
        self.modified_ground: Optional[Ground] = None
        self.modifier_expr: Optional[Expression]
        if isinstance(value, Lifted):
            self.modifier_expr = FunctionExpression(Ground(value, params))
        else:
            self.modifier_expr = ValueExpression(value)

    def __str__(self) -> str:
        out = self.name + " "
        if self.modified_ground is not None:
            out += str(self.modified_ground)
        if self.modifier_expr is not None:
            out += self.modifier_expr.info()
        return out

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        out = tabindent(indent) + "( " + self.name + " "
        if self.modified_ground is not None:
            out += self.modified_ground.pddl(0, ts, domain)
        else:
            out += "( TOTAL-COST )"
        out += " " + self.modifier_expr.pddl(0, ts, domain)
        return out + " )"

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        f.assert_token("(")
        target = f.get_token()
        if target == "TOTAL-COST":
            f.next()
            f.assert_token(")")
        else:
            self.modified_ground = Ground(domain.funcs.get(target))
            self.modified_ground.parse(f, ts, domain)
        f.next()
        self.modifier_expr = create_expression(f, ts, domain)
        f.next()
        f.assert_token(")")

    def add_params(self, m: int, n: int) -> None:
        """Shift variable references at or above ``m`` by ``n``."""
        if self.modified_ground is not None:
            self.modified_ground.add_params(m, n)
        if self.modifier_expr is not None:
            self.modifier_expr.add_params(m, n)

    def copy(self, domain: Any) -> FunctionModifier:
        clone = _copy.copy(self)
        if self.modified_ground is not None:
            clone.modified_ground = self.modified_ground.copy(domain)
        if self.modifier_expr is not None:
            clone.modifier_expr = self.modifier_expr.copy(domain)
        return clone


class Increase(FunctionModifier):
    """An ``increase`` effect."""

    def __init__(self, value: Union[float, Lifted] = 1, params: Optional[Iterable[int]] = None) -> None:
        super().__init__("INCREASE", value, params)


class Decrease(FunctionModifier):
    """A ``decrease`` effect."""

    def __init__(self, value: Union[float, Lifted] = 1, params: Optional[Iterable[int]] = None) -> None:
        super().__init__("DECREASE", value, params)