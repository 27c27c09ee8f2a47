"""PDDL types with their constants, objects and subtype hierarchy."""

from __future__ import annotations

from typing import Optional

from .tokens import TokenStruct


class Type:
    """A named type holding constants and objects, with subtypes.

    Objects are numbered from 0 across the type and its subtypes in order;
    constants are numbered from -1 downwards in the same way.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.subtypes: list[Type] = []
        self.supertype: Optional[Type] = None
        self.constants: TokenStruct[str] = TokenStruct()
        self.objects: TokenStruct[str] = TokenStruct()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"

    def __str__(self) -> str:
        if self.supertype is not None:
            return f"{self.name}[{self.supertype.name}]"
        return self.name

    def get_name(self) -> str:
        """Return the name used when generating variable names."""
        return self.name

    def insert_subtype(self, t: Type) -> None:
        """Make ``t`` a subtype of this type."""
        self.subtypes.append(t)
        t.supertype = self

    def copy_subtypes(self, t: Type, ts: TokenStruct[Type]) -> None:
        """Add the types in ``ts`` named like the subtypes of ``t``."""
        for sub in t.subtypes:
            self.subtypes.append(ts.get(sub.name))

    def pddl(self) -> str:
        """Return the line describing this type in a :TYPES block."""
        out = "\t" + self.name
        if self.supertype is not None:
            out += " - " + self.supertype.name
        return out + "\n"

    def parse_constant(self, name: str) -> tuple[bool, int]:
        """Return (True, index) for a known constant, else (False, count)."""
        position = self.constants.index(name)
        if position >= 0:
            return True, -1 - position
        seen = len(self.constants)
        for sub in self.subtypes:
            found, value = sub.parse_constant(name)
            if found:
                return True, value - seen
            seen += value
        return False, seen

    def parse_object(self, name: str) -> tuple[bool, int]:
        """Return (True, index) for a known object, else (False, count)."""
        position = self.objects.index(name)
        if position >= 0:
            return True, position
        seen = len(self.objects)
        for sub in self.subtypes:
            found, value = sub.parse_object(name)
            if found:
                return True, seen + value
            seen += value
        return False, seen

    def object(self, index: int) -> tuple[str, int]:
        """Return the name at ``index`` and 0, or '' and the unused remainder."""
        if index < 0:
            if -index <= len(self.constants):
                return self.constants[-1 - index], 0
            index += len(self.constants)
        else:
            if index < len(self.objects):
                return self.objects[index], 0
            index -= len(self.objects)
        for sub in self.subtypes:
            name, rest = sub.object(index)
            if name:
                return name, rest
            index = rest
        return "", index

    def no_objects(self) -> int:
        """Count objects and constants in this type and all subtypes."""
        return len(self.objects) + len(self.constants) + sum(s.no_objects() for s in self.subtypes)

    def no_constants(self) -> int:
        """Count constants in this type and all subtypes."""
        return len(self.constants) + sum(s.no_constants() for s in self.subtypes)

    def _fill_copy(self, clone: Type) -> Type:
        clone.constants = self.constants.copy()
        clone.objects = self.objects.copy()
        return clone

    def copy(self) -> Type:
        """Return a copy with the same constants and objects, unlinked."""
        return self._fill_copy(Type(self.name))


class EitherType(Type):
    """A type that stands for any of its subtypes."""

    def get_name(self) -> str:
        return "EITHER" + "".join("_" + sub.get_name() for sub in self.subtypes)

    def pddl(self) -> str:
        return ""

    def copy(self) -> EitherType:
        clone = EitherType(self.name)
        self._fill_copy(clone)
        return clone