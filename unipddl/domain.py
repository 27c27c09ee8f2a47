"""PDDL domains: parsing, programmatic construction and printing."""

from __future__ import annotations

from os import PathLike
from typing import Iterable, Optional, Sequence, Union

from .action import Action, TemporalAction
from .condition import Condition, Function, Ground, Lifted, ParamCond
from .expression import CompositeExpression, Decrease, FunctionModifier, Increase
from .filereader import Filereader, PddlError
from .logic import And, Derived, Equals, Exists, Forall, Not, Oneof, Or, When
from .tokens import TokenStruct
from .typesys import EitherType, Type

_REQUIREMENTS = {
    "STRIPS": "strips",
    "ADL": "adl",
    "NEGATIVE-PRECONDITIONS": "neg",
    "CONDITIONAL-EFFECTS": "condeffects",
    "TYPING": "typed",
    "ACTION-COSTS": "costs",
    "EQUALITY": "equality",
    "DURATIVE-ACTIONS": "temp",
    "NON-DETERMINISTIC": "nondet",
    "UNIVERSAL-PRECONDITIONS": "universal",
    "FLUENTS": "fluents",
    "DISJUNCTIVE-PRECONDITIONS": "disj",
    "DERIVED-PREDICATES": "derivedpred",
}

# Order in which requirements are printed.
_PRINT_ORDER = (
    ("equality", "EQUALITY"),
    ("strips", "STRIPS"),
    ("costs", "ACTION-COSTS"),
    ("adl", "ADL"),
    ("neg", "NEGATIVE-PRECONDITIONS"),
    ("condeffects", "CONDITIONAL-EFFECTS"),
    ("typed", "TYPING"),
    ("temp", "DURATIVE-ACTIONS"),
    ("nondet", "NON-DETERMINISTIC"),
    ("universal", "UNIVERSAL-PRECONDITIONS"),
    ("fluents", "FLUENTS"),
    ("disj", "DISJUNCTIVE-PRECONDITIONS"),
    ("derivedpred", "DERIVED-PREDICATES"),
)

_SIMPLE_CONDITIONS = {
    "=": Equals,
    "AND": And,
    "EXISTS": Exists,
    "FORALL": Forall,
    "INCREASE": Increase,
    "DECREASE": Decrease,
    "NOT": Not,
    "ONEOF": Oneof,
    "OR": Or,
    "WHEN": When,
}

_COMPARISONS = frozenset({">=", ">", "<=", "<"})


class Domain:
    """A planning domain: requirements, types, predicates, functions and actions.

    Type 0 is always the root type, named OBJECT unless the domain declares
    OBJECT itself.
    """

    def __init__(self, path: Union[str, PathLike, None] = None) -> None:
        self.name = ""
        self.equality = False
        self.strips = False
        self.adl = False
        self.condeffects = False
        self.typed = False
        self.cons = False
        self.costs = False
        self.temp = False
        self.nondet = False
        self.neg = False
        self.disj = False
        self.universal = False
        self.fluents = False
        self.derivedpred = False

        self.types: TokenStruct[Type] = TokenStruct()
        self.preds: TokenStruct[Lifted] = TokenStruct()
        self.funcs: TokenStruct[Function] = TokenStruct()
        self.actions: TokenStruct[Action] = TokenStruct()
        self.derived: TokenStruct[Derived] = TokenStruct()
        self.tasks: TokenStruct[ParamCond] = TokenStruct()

        self.types.insert(Type("OBJECT"))
        if path is not None:
            self.parse(path)

    # ----------------------------------------------------------------- parsing

    def parse(self, path: Union[str, PathLike]) -> None:
        """Parse the domain file at ``path``."""
        self._parse_reader(Filereader(path))

    def parse_text(self, text: str) -> None:
        """Parse a domain given as a string."""
        self._parse_reader(Filereader.from_text(text))

    def _parse_reader(self, f: Filereader) -> None:
        self.name = f.parse_name("DOMAIN")
        while f.get_char() != ")":
            f.assert_token("(")
            f.assert_token(":")
            block = f.get_token()
            if not self.parse_block(block, f):
                f.token_exit(block)
            f.next()

    def parse_block(self, t: str, f: Filereader) -> bool:
        """Parse the block named ``t``; return False if the name is unknown."""
        handlers = {
            "REQUIREMENTS": self.parse_requirements,
            "TYPES": self.parse_types,
            "CONSTANTS": self.parse_constants,
            "PREDICATES": self.parse_predicates,
            "FUNCTIONS": self.parse_functions,
            "ACTION": self.parse_action,
            "DURATIVE-ACTION": self.parse_durative_action,
            "DERIVED": self.parse_derived,
        }
        handler = handlers.get(t)
        if handler is None:
            return False
        handler(f)
        return True

    def parse_requirements(self, f: Filereader) -> None:
        """Parse the list of ``:requirement`` keywords."""
        f.next()
        while f.get_char() != ")":
            f.assert_token(":")
            requirement = f.get_token()
            if not self.parse_requirement(requirement):
                f.token_exit(requirement)
            f.next()
        f.col += 1

    def parse_requirement(self, s: str) -> bool:
        """Set the flag for requirement ``s``; return False if it is unknown."""
        flag = _REQUIREMENTS.get(s)
        if flag is None:
            return False
        setattr(self, flag, True)
        return True

    def get_type(self, s: str) -> Type:
        """Return the type named ``s``, creating it (or an EITHER type) if needed."""
        position = self.types.index(s)
        if position < 0:
            if s.startswith("("):
                position = self.types.insert(EitherType(s))
                k = 9
                while s[k] != ")":
                    end = s.find(" ", k)
                    self.types[position].subtypes.append(self.get_type(s[k:end]))
                    k = end + 1
            else:
                position = self.types.insert(Type(s))
        return self.types[position]

    def convert_types(self, names: Iterable[str]) -> list[int]:
        """Return the type indices for a list of type names."""
        return [self.types.index(self.get_type(name).name) for name in names]

    def parse_types(self, f: Filereader) -> None:
        """Parse the :TYPES block and build the type hierarchy."""
        if not self.typed:
            raise PddlError("Requirement :TYPING needed to define types")

        ts = f.parse_typed_list(False)

        if ts.index("OBJECT") >= 0:
            self.types[0].name = "SUPERTYPE"
            self.types.token_map.clear()
            self.types.token_map["SUPERTYPE"] = 0

        for token, parent in zip(ts.tokens, ts.types):
            if parent:
                child = self.get_type(token)
                self.get_type(parent).insert_subtype(child)
            else:
                self.get_type(token)

        root = self.types[0]
        for t in list(self.types)[1:]:
            if t.supertype is None:
                root.insert_subtype(t)

    def parse_constants(self, f: Filereader) -> None:
        """Parse the :CONSTANTS block."""
        if self.typed and not len(self.types):
            raise PddlError("Types needed before defining constants")
        self.cons = True
        ts = f.parse_typed_list(True, self.types)
        for token, type_name in zip(ts.tokens, ts.types):
            self.get_type(type_name).constants.insert(token)

    def parse_predicates(self, f: Filereader) -> None:
        """Parse the :PREDICATES block; private sections are read as public."""
        if self.typed and not len(self.types):
            raise PddlError("Types needed before defining predicates")
        f.next()
        while f.get_char() != ")":
            f.assert_token("(")
            if f.get_char() == ":":
                f.assert_token(":PRIVATE")
                f.parse_typed_list(True, self.types, "(")
                f.col -= 1
                self.parse_predicates(f)
            else:
                pred = Lifted(f.get_token())
                pred.parse(f, self.types[0].constants, self)
                self.preds.insert(pred)
            f.next()
        f.col += 1

    def parse_functions(self, f: Filereader) -> None:
        """Parse the :FUNCTIONS block."""
        if self.typed and not len(self.types):
            raise PddlError("Types needed before defining functions")
        f.next()
        while f.get_char() != ")":
            f.assert_token("(")
            func = Function(f.get_token())
            func.parse(f, self.types[0].constants, self)
            self.funcs.insert(func)
            f.next()
        f.col += 1

    def parse_action(self, f: Filereader) -> None:
        """Parse an :ACTION block."""
        if not len(self.preds):
            raise PddlError("Predicates needed before defining actions")
        f.next()
        action = Action(f.get_token())
        action.parse(f, self.types[0].constants, self)
        self.actions.insert(action)

    def parse_derived(self, f: Filereader) -> None:
        """Parse a :DERIVED block."""
        if not len(self.preds):
            raise PddlError("Predicates needed before defining derived predicates")
        f.next()
        derived = Derived()
        derived.parse(f, self.types[0].constants, self)
        self.derived.insert(derived)

    def parse_durative_action(self, f: Filereader) -> None:
        """Parse a :DURATIVE-ACTION block."""
        if not len(self.preds):
            raise PddlError("Predicates needed before defining actions")
        f.next()
        action = TemporalAction(f.get_token())
        action.parse(f, self.types[0].constants, self)
        self.actions.insert(action)

    # ------------------------------------------------------------ construction

    def copy_types(self) -> TokenStruct[Type]:
        """Return a fresh type table with copied constants, objects and links."""
        out: TokenStruct[Type] = TokenStruct()
        for t in self.types:
            out.insert(t.copy())
        for i, t in enumerate(self.types):
            if i == 0:
                continue
            if t.supertype is not None:
                out[out.index(t.supertype.name)].insert_subtype(out[i])
            else:
                out[i].copy_subtypes(t, out)
        return out

    def set_types(self, other_types: TokenStruct[Type]) -> None:
        """Replace the type table."""
        self.types = other_types

    def create_type(self, name: str, parent: str = "OBJECT") -> None:
        """Create type ``name`` as a subtype of ``parent``."""
        new_type = Type(name)
        self.types.insert(new_type)
        self.types.get(parent).insert_subtype(new_type)

    def create_constant(self, name: str, type_name: str) -> None:
        """Add constant ``name`` to the type ``type_name``."""
        self.types.get(type_name).constants.insert(name)

    def create_predicate(self, name: str, params: Sequence[str] = ()) -> Lifted:
        """Create a predicate over the named parameter types."""
        pred = Lifted(name, [self.types.index(p) for p in params])
        self.preds.insert(pred)
        return pred

    def create_function(self, name: str, return_type: int, params: Sequence[str] = ()) -> Function:
        """Create a function over the named parameter types."""
        func = Function(name, return_type, [self.types.index(p) for p in params])
        self.funcs.insert(func)
        return func

    def create_action(self, name: str, params: Sequence[str] = ()) -> Action:
        """Create an action with empty conjunctive precondition and effect."""
        action = Action(name, [self.types.index(p) for p in params], And(), And())
        self.actions.insert(action)
        return action

    @staticmethod
    def _as_and(cond: Optional[Condition], source: Optional[Condition]) -> And:
        if isinstance(source, And):
            return source
        result = And()
        if source is not None:
            result.add(source)
        return result

    def _pre(self, act: str) -> And:
        action = self.actions.get(act)
        action.pre = self._as_and(None, action.pre)
        return action.pre

    def _eff(self, act: str) -> And:
        action = self.actions.get(act)
        action.eff = self._as_and(None, action.eff)
        return action.eff

    def set_pre(self, act: str, cond: Optional[Condition]) -> None:
        """Set the precondition of ``act`` to a copy of ``cond`` as a conjunction."""
        action = self.actions.get(act)
        if isinstance(cond, And):
            action.pre = cond.copy(self)
        else:
            action.pre = And()
            if cond is not None:
                action.pre.add(cond.copy(self))

    def add_pre(self, neg: bool, act: str, pred: str, params: Sequence[int] = ()) -> None:
        """Add a (possibly negated) atom to the precondition of ``act``."""
        atom = self.ground(pred, params)
        self._pre(act).add(Not(atom) if neg else atom)

    def add_or_pre(
        self,
        act: str,
        pred1: str,
        pred2: str,
        params1: Sequence[int] = (),
        params2: Sequence[int] = (),
    ) -> None:
        """Add a disjunction of two atoms to the precondition of ``act``."""
        disjunction = Or(self.ground(pred1, params1), self.ground(pred2, params2))
        self._pre(act).add(disjunction)

    def set_eff(self, act: str, cond: Optional[Condition]) -> None:
        """Set the effect of ``act`` to a copy of ``cond`` as a conjunction."""
        action = self.actions.get(act)
        if isinstance(cond, And):
            action.eff = cond.copy(self)
        else:
            action.eff = And()
            if cond is not None:
                action.eff.add(cond.copy(self))

    def add_eff(self, neg: bool, act: str, pred: str, params: Sequence[int] = ()) -> None:
        """Add a (possibly negated) atom to the effect of ``act``."""
        atom = self.ground(pred, params)
        self._eff(act).add(Not(atom) if neg else atom)

    def add_cost(self, act: str, cost: int) -> None:
        """Add a constant total-cost increase to the effect of ``act``."""
        self._eff(act).add(Increase(cost))

    def add_function_cost(self, act: str, func: str, params: Sequence[int] = ()) -> None:
        """Add a total-cost increase by function ``func`` to the effect of ``act``."""
        self._eff(act).add(Increase(self.funcs.get(func), params))

    def add_function_modifier(self, act: str, modifier: FunctionModifier) -> None:
        """Add a function modifier to the effect of ``act``."""
        self._eff(act).add(modifier)

    def ground(self, name: str, params: Sequence[int] = ()) -> Ground:
        """Return an atom over predicate ``name``; raise PddlError if unknown."""
        if self.preds.index(name) < 0:
            shown = "[" + ",".join(str(p) for p in params) + "]"
            raise PddlError(
                f"Creating a ground condition {name}{shown} failed "
                f"since the predicate {name} does not exist!"
            )
        return Ground(self.preds.get(name), list(params))

    def type_list(self, cond: ParamCond) -> list[str]:
        """Return the type names of the parameters of ``cond``."""
        return [self.types[p].name for p in cond.params]

    def object_list(self, ground: Ground) -> list[str]:
        """Return the object or constant names of a ground atom."""
        return [
            self.types[type_index].object(param)[0]
            for type_index, param in zip(ground.lifted.params, ground.params)
        ]

    def add_params(self, name: str, type_names: Sequence[str]) -> None:
        """Append parameters of the named types to action ``name``."""
        self.actions.get(name).extend_params(self.convert_types(type_names))

    def assert_subtype(self, t1: int, t2: int) -> bool:
        """Return whether type ``t1`` is ``t2`` or one of its descendants."""
        target = self.types[t2].name
        current: Optional[Type] = self.types[t1]
        while current is not None:
            if current.name == target:
                return True
            current = current.supertype
        return False

    def constant_index(self, name: str, type_name: str) -> int:
        """Return the index of constant ``name`` within ``type_name``."""
        return self.types.get(type_name).parse_constant(name)[1]

    # ---------------------------------------------------------------- printing

    def print_requirements(self) -> str:
        """Return the :REQUIREMENTS block."""
        flags = "".join(f" :{word}" for attr, word in _PRINT_ORDER if getattr(self, attr))
        return f"( :REQUIREMENTS{flags} )\n"

    def print_additional_blocks(self) -> str:
        """Return extra blocks printed before the closing parenthesis."""
        return ""

    def __str__(self) -> str:
        out = f"( DEFINE ( DOMAIN {self.name} )\n"
        out += self.print_requirements()

        if self.typed:
            out += "( :TYPES\n"
            out += "".join(t.pddl() for t in list(self.types)[1:])
            out += ")\n"

        if self.cons:
            out += "( :CONSTANTS\n"
            for t in self.types:
                if len(t.constants):
                    out += "\t" + "".join(c + " " for c in t.constants)
                    if self.typed:
                        out += "- " + t.name
                    out += "\n"
            out += ")\n"

        out += "( :PREDICATES\n"
        for pred in self.preds:
            out += pred.pddl(1, TokenStruct(), self) + "\n"
        out += ")\n"

        if len(self.funcs):
            out += "( :FUNCTIONS\n"
            for func in self.funcs:
                out += func.pddl(1, TokenStruct(), self) + "\n"
            out += ")\n"

        for action in self.actions:
            out += action.pddl(0, TokenStruct(), self)
        for derived in self.derived:
            out += derived.pddl(0, TokenStruct(), self)

        out += self.print_additional_blocks()
        return out + ")\n"

    # -------------------------------------------------------------- conditions

    def create_condition(self, f: Filereader) -> Condition:
        """Read a keyword or predicate name and return an empty matching condition."""
        token = f.get_token()
        factory = _SIMPLE_CONDITIONS.get(token)
        if factory is not None:
            return factory()
        if token in _COMPARISONS:
            return CompositeExpression(token)
        position = self.preds.index(token)
        if position >= 0:
            return Ground(self.preds[position])
        f.token_exit(token)