"""PDDL problem instances: objects, initial state, goal and metric."""

from __future__ import annotations

from os import PathLike
from typing import Sequence, Union

from .condition import Ground
from .domain import Domain
from .facts import NumericGroundFunc, ObjectGroundFunc, TypeGround
from .filereader import Filereader, PddlError
from .tokens import TokenStruct


class Instance:
    """A planning problem over a domain.

    Objects are stored in the domain's types, so parsing an instance
    extends the type table of ``domain``.
    """

    def __init__(self, domain: Domain, path: Union[str, PathLike, None] = None) -> None:
        self.domain = domain
        self.name = ""
        self.init: list[Ground] = []
        self.goal: list[Ground] = []
        self.metric = False
        if path is not None:
            self.parse(path)

    # ----------------------------------------------------------------- parsing

    def parse(self, path: Union[str, PathLike]) -> None:
        """Parse the problem file at ``path``."""
        self._parse_reader(Filereader(path))

    def parse_text(self, text: str) -> None:
        """Parse a problem given as a string."""
        self._parse_reader(Filereader.from_text(text))

    def _parse_reader(self, f: Filereader) -> None:
        self.name = f.parse_name("PROBLEM")
        handlers = {
            "DOMAIN": self.parse_domain,
            "OBJECTS": self.parse_objects,
            "INIT": self.parse_init,
            "GOAL": self.parse_goal,
            "METRIC": self.parse_metric,
        }
        while f.get_char() != ")":
            f.assert_token("(")
            f.assert_token(":")
            block = f.get_token()
            handler = handlers.get(block)
            if handler is None:
                f.token_exit(block)
            handler(f)
            f.next()

    def parse_domain(self, f: Filereader) -> None:
        """Check that the problem names this instance's domain."""
        f.next()
        f.assert_token(self.domain.name)
        f.assert_token(")")

    def parse_objects(self, f: Filereader) -> None:
        """Parse the :OBJECTS block into the domain's types."""
        ts = f.parse_typed_list(True, self.domain.types)
        for token, type_name in zip(ts.tokens, ts.types):
            type_ = self.domain.get_type(type_name)
            found, _ = type_.parse_object(token)
            if not found:
                type_.objects.insert(token)

    def parse_ground(self, f: Filereader, target: list) -> None:
        """Parse one fact or function value and append it to ``target``."""
        domain = self.domain
        if f.get_char() == "=":
            f.assert_token("=")
            f.assert_token("(")
            token = f.get_token()
            position = domain.funcs.index(token)
            if position < 0:
                f.token_exit(token)
            func = domain.funcs[position]
            if func.return_type < 0:
                fact: TypeGround = NumericGroundFunc(func)
            else:
                fact = ObjectGroundFunc(func)
        else:
            fact = TypeGround(domain.preds.get(f.get_token(domain.preds)))
        fact.parse(f, domain.types[0].constants, domain)
        target.append(fact)

    def parse_init(self, f: Filereader) -> None:
        """Parse the :INIT block."""
        f.next()
        while f.get_char() != ")":
            f.assert_token("(")
            self.parse_ground(f, self.init)
            f.next()
        f.col += 1

    def parse_goal(self, f: Filereader) -> None:
        """Parse the :GOAL block: a single fact or a conjunction of facts."""
        f.next()
        f.assert_token("(")
        token = f.get_token()
        if token == "AND":
            f.next()
            while f.get_char() != ")":
                f.assert_token("(")
                self.parse_ground(f, self.goal)
                f.next()
            f.col += 1
            f.next()
        else:
            f.col -= len(token)
            self.parse_ground(f, self.goal)
        f.assert_token(")")

    def parse_metric(self, f: Filereader) -> None:
        """Parse a metric minimising total time or total cost."""
        if not self.domain.temp and not self.domain.costs:
            raise PddlError("METRIC only defined for temporal actions or actions with costs!")
        self.metric = True
        f.next()
        f.assert_token("MINIMIZE")
        f.assert_token("(")
        f.assert_token("TOTAL-TIME" if self.domain.temp else "TOTAL-COST")
        f.assert_token(")")
        f.assert_token(")")

    # ------------------------------------------------------------ construction

    def add_object(self, name: str, type_name: str) -> None:
        """Add object ``name`` of type ``type_name``."""
        self.domain.get_type(type_name).objects.insert(name)

    def add_init(self, name: str, values: Sequence[str] = ()) -> None:
        """Add predicate fact ``name`` over the named objects to the initial state."""
        fact = TypeGround(self.domain.preds.get(name))
        fact.insert(self.domain, values)
        self.init.append(fact)

    def add_init_value(self, name: str, value: Union[int, float], values: Sequence[str] = ()) -> None:
        """Add a function value: a float is numeric, an int is an object index."""
        func = self.domain.funcs.get(name)
        if isinstance(value, float):
            fact: TypeGround = NumericGroundFunc(func, value)
        else:
            fact = ObjectGroundFunc(func, value)
        fact.insert(self.domain, values)
        self.init.append(fact)

    def add_init_fluent(self, fluent: Ground, values: Sequence[str] = ()) -> None:
        """Add a fact or function value shaped like ``fluent`` over the named objects."""
        domain = self.domain
        if isinstance(fluent, ObjectGroundFunc):
            fact: TypeGround = ObjectGroundFunc(domain.funcs.get(fluent.name), fluent.value)
        elif isinstance(fluent, NumericGroundFunc):
            fact = NumericGroundFunc(domain.funcs.get(fluent.name), fluent.value)
        else:
            fact = TypeGround(domain.preds.get(fluent.name))
        fact.insert(domain, values)
        self.init.append(fact)

    def add_goal(self, name: str, values: Sequence[str] = ()) -> None:
        """Add predicate fact ``name`` over the named objects to the goal."""
        fact = TypeGround(self.domain.preds.get(name))
        fact.insert(self.domain, values)
        self.goal.append(fact)

    # ---------------------------------------------------------------- printing

    def __str__(self) -> str:
        domain = self.domain
        out = f"( DEFINE ( PROBLEM {self.name} )\n"
        out += f"( :DOMAIN {domain.name} )\n"

        out += "( :OBJECTS\n"
        for t in domain.types:
            if len(t.objects):
                out += "\t" + "".join(o + " " for o in t.objects)
                if domain.typed:
                    out += "- " + t.name
                out += "\n"
        out += ")\n"

        out += "( :INIT\n"
        for fact in self.init:
            out += fact.pddl(1, TokenStruct(), domain) + "\n"
        out += ")\n"

        out += "( :GOAL\n\t( AND\n"
        for fact in self.goal:
            out += fact.pddl(2, TokenStruct(), domain) + "\n"
        out += "\t)\n)\n"

        if self.metric:
            out += "( :METRIC MINIMIZE ( TOTAL-"
            out += "TIME" if domain.temp else "COST"
            out += " ) )\n"

        return out + ")\n"