"""Line-oriented tokenizer for PDDL files."""

from __future__ import annotations

import re
import string
from os import PathLike
from typing import NoReturn, Optional, Union

from .tokens import TokenStruct

_IGNORED = frozenset(" \t\r\n\f")
_TOKEN_RE = re.compile(r"[^ \t\r\n\f(){},]*")
_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


class PddlError(Exception):
    """Base error for PDDL parsing, optionally carrying a location."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.message = message
        self.line = line
        self.column = column
        text = message if line is None else f"Line {line}, column {column}: {message}"
        super().__init__(text)


class ExpectedToken(PddlError):
    """A required token was not found."""

    def __init__(self, token: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.token = token
        super().__init__(f"{token} expected", line, column)


class UnknownToken(PddlError):
    """A token does not name anything known."""

    def __init__(self, token: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        self.token = token
        super().__init__(f"{token} does not name a known token", line, column)


class UnexpectedEOF(PddlError):
    """The input ended while more was expected."""

    def __init__(self, line: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__("Unexpected EOF found", line, column)


class Filereader:
    """Reads PDDL text one line at a time, tracking row and column.

    ``line`` is the current line, ``row`` its 1-based number and ``col`` the
    0-based position within it.
    """

    def __init__(self, path: Union[str, PathLike]) -> None:
        self.path = str(path)
        with open(path, encoding="utf-8", errors="replace") as handle:
            text = handle.read()
        self._start(text)

    @classmethod
    def from_text(cls, text: str) -> Filereader:
        """Create a reader over an in-memory string."""
        reader = cls.__new__(cls)
        reader.path = "<text>"
        reader._start(text)
        return reader

    def _start(self, text: str) -> None:
        self._lines = text.split("\n")
        self._next_line = 1
        self.line = self._lines[0]
        self.row = 1
        self.col = 0
        self.next()

    def _skip_ignored(self) -> None:
        while self.col < len(self.line) and self.line[self.col] in _IGNORED:
            self.col += 1

    def get_char(self) -> str:
        """Return the current character, or '' at the end of the line."""
        return self.line[self.col] if self.col < len(self.line) else ""

    def next(self) -> None:
        """Advance to the next character that is not whitespace or comment."""
        self._skip_ignored()
        while self.col >= len(self.line) or self.line[self.col] == ";":
            self.row += 1
            self.col = 0
            if self._next_line >= len(self._lines):
                raise UnexpectedEOF(self.row, self.col + 1)
            self.line = self._lines[self._next_line]
            self._next_line += 1
            self._skip_ignored()

    def get_token(self, ts: Optional[TokenStruct] = None) -> str:
        """Read a token in upper case; if ``ts`` is given it must name an entry."""
        match = _TOKEN_RE.match(self.line, min(self.col, len(self.line)))
        self.col = match.end()
        token = match.group().translate(_UPPER)
        if ts is not None and ts.index(token) < 0:
            self.token_exit(token)
        return token

    def token_exit(self, token: str) -> NoReturn:
        """Step back over ``token`` and report it as unknown."""
        self.col -= len(token)
        raise UnknownToken(token, self.row, self.col + 1)

    def assert_token(self, token: str) -> None:
        """Consume ``token`` (case-insensitively) or raise ExpectedToken."""
        segment = self.line[self.col:self.col + len(token)]
        matched = sum(
            1
            for have, want in zip(segment, token)
            if have == want or ("a" <= have <= "z" and ord(have) == ord(want) + 32)
        )
        if matched < len(token):
            raise ExpectedToken(token, self.row, self.col + 1)
        self.col += len(token)
        self.next()

    def parse_name(self, kind: str) -> str:
        """Parse ``( DEFINE ( <kind> name )`` and return the name."""
        self.assert_token("(")
        self.assert_token("DEFINE")
        self.assert_token("(")
        self.assert_token(kind)
        name = self.get_token()
        self.next()
        self.assert_token(")")
        return name

    def parse_typed_list(
        self,
        check: bool,
        ts: Optional[TokenStruct] = None,
        lt: str = "",
    ) -> TokenStruct[str]:
        """Parse a ``name... - type`` list up to ')' or a character in ``lt``.

        When ``check`` is true, type names must be entries of ``ts`` and
        untyped names get the type OBJECT; otherwise they get ''.
        """
        known = ts if ts is not None else TokenStruct()
        lookup = known if check else None
        out: TokenStruct[str] = TokenStruct()
        typed_upto = 0

        def stops(ch: str) -> bool:
            return ch == ")" or (ch != "" and ch in lt)

        self.next()
        while not stops(self.get_char()):
            ch = self.get_char()
            if ch == "-":
                self.assert_token("-")
                if self.get_char() == "(":
                    self.assert_token("(")
                    self.assert_token("EITHER")
                    type_name = "( EITHER"
                    while self.get_char() != ")":
                        type_name += " " + self.get_token(lookup)
                        self.next()
                    type_name += " )"
                    self.col += 1
                else:
                    type_name = self.get_token(lookup)
                out.types.extend([type_name] * (len(out) - typed_upto))
                typed_upto = len(out)
            elif ch == "(":
                self.assert_token("(")
                self.assert_token(":PRIVATE")
                self.get_token()
                out.append(self.parse_typed_list(check, ts))
            else:
                out.insert(self.get_token())
            self.next()

        if typed_upto < len(out):
            out.types.extend(["OBJECT" if check else ""] * (len(out) - typed_upto))
        self.col += 1
        return out