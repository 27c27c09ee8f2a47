"""Instantaneous and durative actions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional

from .condition import Condition, Ground, ParamCond
from .expression import Expression, create_expression
from .logic import And, Not
from .tokens import TokenStruct

if TYPE_CHECKING:
    from .filereader import Filereader


def _subconditions(cond: Optional[Condition]) -> list[Condition]:
    if isinstance(cond, And):
        return list(cond.conds)
    return [cond] if cond is not None else []


def _grounds(cond: Optional[Condition], negated: bool) -> list[Ground]:
    def pick(c: Condition) -> Optional[Ground]:
        if negated:
            return c.cond if isinstance(c, Not) else None
        return c if isinstance(c, Ground) else None

    candidates = list(cond.conds) if isinstance(cond, And) else []
    if cond is not None:
        candidates.append(cond)
    return [g for g in map(pick, candidates) if g is not None]


class Action(ParamCond):
    """An action with typed parameters, a precondition and an effect."""

    def __init__(
        self,
        name: str = "",
        params: Optional[Iterable[int]] = None,
        pre: Optional[Condition] = None,
        eff: Optional[Condition] = None,
    ) -> None:
        super().__init__(name, params)
        self.pre = pre
        self.eff = eff

    def __str__(self) -> str:
        out = super().__str__() + "\n" + f"Pre: {self.pre}"
        if self.eff is not None:
            out += f"Eff: {self.eff}"
        return out

    def duration(self) -> float:
        """Return the duration; instantaneous actions take 1."""
        return 1

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        scope: TokenStruct[str] = TokenStruct()
        out = f"( :ACTION {self.name}\n"
        out += "  :PARAMETERS " + self.print_params(0, scope, domain)
        out += "  :PRECONDITION\n"
        out += self.pre.pddl(1, scope, domain) if self.pre is not None else "\t()"
        out += "\n  :EFFECT\n"
        out += self.eff.pddl(1, scope, domain) if self.eff is not None else "\t()"
        return out + "\n)\n"

    def parse_conditions(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        """Read the optional :PRECONDITION and the :EFFECT, then the closing ')'."""
        f.next()
        f.assert_token(":")
        section = f.get_token()
        if section == "PRECONDITION":
            f.next()
            f.assert_token("(")
            if f.get_char() != ")":
                self.pre = domain.create_condition(f)
                self.pre.parse(f, ts, domain)
            else:
                f.col += 1
            f.next()
            f.assert_token(":")
            section = f.get_token()
        if section != "EFFECT":
            f.token_exit(section)
        f.next()
        f.assert_token("(")
        if f.get_char() != ")":
            self.eff = domain.create_condition(f)
            self.eff.parse(f, ts, domain)
        else:
            f.col += 1
        f.next()
        f.assert_token(")")

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        f.assert_token(":PARAMETERS")
        f.assert_token("(")
        scope = f.parse_typed_list(True, domain.types)
        self.params = domain.convert_types(scope.types)
        self.parse_conditions(f, scope, domain)

    def add_params(self, m: int, n: int) -> None:
        pass

    def extend_params(self, types: Iterable[int]) -> None:
        """Append parameters of the given type indices, shifting inner variables."""
        extra = list(types)
        for cond in (self.pre, self.eff):
            if cond is not None:
                cond.add_params(len(self.params), len(extra))
        self.params.extend(extra)

    def copy(self, domain: Any) -> Action:
        return Action(
            self.name,
            self.params,
            self.pre.copy(domain) if self.pre is not None else None,
            self.eff.copy(domain) if self.eff is not None else None,
        )

    def precons(self) -> list[Condition]:
        """Return the conjuncts of the precondition."""
        return _subconditions(self.pre)

    def effects(self) -> list[Condition]:
        """Return the conjuncts of the effect."""
        return _subconditions(self.eff)

    def add_effects(self) -> list[Ground]:
        """Return the atoms the effect makes true."""
        return _grounds(self.eff, False)

    def delete_effects(self) -> list[Ground]:
        """Return the atoms the effect makes false."""
        return _grounds(self.eff, True)


class TemporalAction(Action):
    """A durative action; ``pre`` and ``eff`` hold the at-start parts."""

    def __init__(self, name: str = "", params: Optional[Iterable[int]] = None) -> None:
        super().__init__(name, params)
        self.duration_expr: Optional[Expression] = None
        self.pre_o: Optional[And] = None
        self.pre_e: Optional[And] = None
        self.eff_e: Optional[And] = None

    def duration(self) -> float:
        return self.duration_expr.evaluate() if self.duration_expr is not None else 0

    def parse_duration(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> Expression:
        """Read the duration expression."""
        return create_expression(f, ts, domain)

    def print_condition(self, ts: TokenStruct[str], domain: Any, label: str, cond: Optional[Condition]) -> str:
        """Return each conjunct of ``cond`` wrapped in the time label."""
        return "".join(
            f"\t\t( {label} " + c.pddl(0, ts, domain) + " )\n" for c in _subconditions(cond)
        )

    def pddl(self, indent: int, ts: TokenStruct[str], domain: Any) -> str:
        scope: TokenStruct[str] = TokenStruct()
        out = f"( :DURATIVE-ACTION {self.name}\n"
        out += "  :PARAMETERS " + self.print_params(0, scope, domain)
        out += "  :DURATION ( = ?DURATION "
        out += self.duration_expr.pddl(0, scope, domain) if self.duration_expr is not None else "1"
        out += " )\n"
        out += "  :CONDITION\n\t( AND\n"
        out += self.print_condition(scope, domain, "AT START", self.pre)
        out += self.print_condition(scope, domain, "OVER ALL", self.pre_o)
        out += self.print_condition(scope, domain, "AT END", self.pre_e)
        out += "\t)\n"
        out += "  :EFFECT\n\t( AND\n"
        out += self.print_condition(scope, domain, "AT START", self.eff)
        out += self.print_condition(scope, domain, "AT END", self.eff_e)
        out += "\t)\n"
        return out + ")\n"

    def parse_condition(self, f: Filereader, ts: TokenStruct[str], domain: Any, target: And) -> None:
        """Read one parenthesised condition and add it to ``target``."""
        f.next()
        f.assert_token("(")
        cond = domain.create_condition(f)
        cond.parse(f, ts, domain)
        target.conds.append(cond)

    def _parse_timed(
        self, f: Filereader, first: str, ts: TokenStruct[str], domain: Any, targets: dict
    ) -> None:
        f.next()
        second = f.get_token()
        target = targets.get((first, second))
        if target is None:
            f.token_exit(first + " " + second)
        self.parse_condition(f, ts, domain, target)
        f.next()
        f.assert_token(")")

    def _parse_timed_block(self, f: Filereader, ts: TokenStruct[str], domain: Any, targets: dict) -> None:
        first = f.get_token()
        if first == "AND":
            f.next()
            while f.get_char() != ")":
                f.assert_token("(")
                self._parse_timed(f, f.get_token(), ts, domain, targets)
                f.next()
            f.col += 1
        else:
            self._parse_timed(f, first, ts, domain, targets)

    def parse(self, f: Filereader, ts: TokenStruct[str], domain: Any) -> None:
        f.next()
        f.assert_token(":PARAMETERS")
        f.assert_token("(")
        scope = f.parse_typed_list(True, domain.types)
        self.params = domain.convert_types(scope.types)

        f.next()
        f.assert_token(":DURATION")
        f.assert_token("(")
        f.assert_token("=")
        f.assert_token("?DURATION")
        self.duration_expr = self.parse_duration(f, scope, domain)
        f.next()
        f.assert_token(")")

        f.next()
        f.assert_token(":")
        section = f.get_token()
        if section == "CONDITION":
            self.pre, self.pre_o, self.pre_e = And(), And(), And()
            f.next()
            f.assert_token("(")
            if f.get_char() != ")":
                targets = {
                    ("AT", "START"): self.pre,
                    ("OVER", "ALL"): self.pre_o,
                    ("AT", "END"): self.pre_e,
                }
                self._parse_timed_block(f, scope, domain, targets)
            else:
                f.col += 1
            f.next()
            f.assert_token(":")
            section = f.get_token()
        if section != "EFFECT":
            f.token_exit(section)

        f.next()
        f.assert_token("(")
        if f.get_char() != ")":
            self.eff, self.eff_e = And(), And()
            targets = {("AT", "START"): self.eff, ("AT", "END"): self.eff_e}
            self._parse_timed_block(f, scope, domain, targets)
        else:
            f.col += 1
        f.next()
        f.assert_token(")")

    def precons_start(self) -> list[Ground]:
        """Return the atoms required at start."""
        return _grounds(self.pre, False)

    def precons_overall(self) -> list[Ground]:
        """Return the atoms required over all."""
        return _grounds(self.pre_o, False)

    def precons_end(self) -> list[Ground]:
        """Return the atoms required at end."""
        return _grounds(self.pre_e, False)

    def end_effects(self) -> list[Condition]:
        """Return the conjuncts of the at-end effect."""
        return _subconditions(self.eff_e)

    def add_end_effects(self) -> list[Ground]:
        """Return the atoms made true at end."""
        return _grounds(self.eff_e, False)

    def delete_end_effects(self) -> list[Ground]:
        """Return the atoms made false at end."""
        return _grounds(self.eff_e, True)