"""Lenient JSON-subset parser for document-database query text.

Accepts strict JSON plus:
- single-quoted strings and unquoted identifier keys (`{ age: { $gt: 3 } }`);
- trailing commas in objects and arrays;
- shell constructors `ObjectId("...")`, `ISODate("...")`, `NumberLong(...)`,
  `NumberInt(...)` and `NumberDecimal("...")`.

Constructors are rendered as canonical Extended JSON (`{"$oid": ...}`,
`{"$date": ...}`, ...). Nesting is capped so hostile input cannot exhaust
the stack.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from formbridge.core.errors import QuerySyntaxError

MAX_DEPTH = 128

_NUMBER = re.compile(r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?")
_IDENTIFIER = re.compile(r"[A-Za-z_$][A-Za-z0-9_$.]*")
_OBJECT_ID = re.compile(r"[0-9a-fA-F]{24}")
_ESCAPES = {
    '"': '"',
    "'": "'",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}


class _ParseError(Exception):
    def __init__(self, position: int, reason: str) -> None:
        super().__init__(reason)
        self.position = position
        self.reason = reason


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.depth = 0
        self.constructors: dict[str, Callable[[list[Any], int], Any]] = {
            "ObjectId": _object_id,
            "ISODate": _iso_date,
            "NumberLong": _number_long,
            "NumberInt": _number_int,
            "NumberDecimal": _number_decimal,
        }

    def parse(self) -> Any:
        value = self._value()
        self._skip_ws()
        if self.pos != len(self.text):
            raise _ParseError(self.pos, "unexpected trailing content")
        return value

    def _skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def _peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _expect(self, char: str) -> None:
        self._skip_ws()
        if self._peek() != char:
            found = self._peek() or "end of input"
            raise _ParseError(self.pos, f"expected '{char}' but found '{found}'")
        self.pos += 1

    def _value(self) -> Any:
        self._skip_ws()
        char = self._peek()
        if not char:
            raise _ParseError(self.pos, "unexpected end of input")
        if char == "{":
            return self._nested(self._object)
        if char == "[":
            return self._nested(self._array)
        if char in ('"', "'"):
            return self._string()
        if char == "-" or char.isdigit():
            return self._number()

        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise _ParseError(self.pos, f"unexpected character '{char}'")
        name = match.group(0)
        start = self.pos
        self.pos = match.end()
        if name == "true":
            return True
        if name == "false":
            return False
        if name == "null":
            return None
        self._skip_ws()
        if self._peek() == "(" and name in self.constructors:
            return self._constructor(name, start)
        raise _ParseError(start, f"unknown literal '{name}'")

    def _nested(self, parse: Callable[[], Any]) -> Any:
        self.depth += 1
        if self.depth > MAX_DEPTH:
            raise _ParseError(self.pos, "document nested too deeply")
        try:
            return parse()
        finally:
            self.depth -= 1

    def _object(self) -> dict[str, Any]:
        self._expect("{")
        result: dict[str, Any] = {}
        self._skip_ws()
        if self._peek() == "}":
            self.pos += 1
            return result
        while True:
            self._skip_ws()
            key = self._key()
            self._expect(":")
            result[key] = self._value()
            self._skip_ws()
            char = self._peek()
            if char == ",":
                self.pos += 1
                self._skip_ws()
                if self._peek() == "}":
                    self.pos += 1
                    return result
                continue
            if char == "}":
                self.pos += 1
                return result
            raise _ParseError(self.pos, "expected ',' or '}' in object")

    def _key(self) -> str:
        if self._peek() in ('"', "'"):
            return self._string()
        match = _IDENTIFIER.match(self.text, self.pos)
        if not match:
            raise _ParseError(self.pos, "expected an object key")
        self.pos = match.end()
        return match.group(0)

    def _array(self) -> list[Any]:
        self._expect("[")
        result: list[Any] = []
        self._skip_ws()
        if self._peek() == "]":
            self.pos += 1
            return result
        while True:
            result.append(self._value())
            self._skip_ws()
            char = self._peek()
            if char == ",":
                self.pos += 1
                self._skip_ws()
                if self._peek() == "]":
                    self.pos += 1
                    return result
                continue
            if char == "]":
                self.pos += 1
                return result
            raise _ParseError(self.pos, "expected ',' or ']' in array")

    def _string(self) -> str:
        quote = self.text[self.pos]
        self.pos += 1
        chars: list[str] = []
        while True:
            if self.pos >= len(self.text):
                raise _ParseError(self.pos, "unterminated string")
            char = self.text[self.pos]
            if char == quote:
                self.pos += 1
                return "".join(chars)
            if char == "\\":
                self.pos += 1
                escape = self._peek()
                if escape == "u":
                    chars.append(self._unicode_escape())
                    continue
                if escape not in _ESCAPES:
                    raise _ParseError(self.pos, f"invalid escape '\\{escape}'")
                chars.append(_ESCAPES[escape])
                self.pos += 1
                continue
            if ord(char) < 0x20:
                raise _ParseError(self.pos, "control character in string")
            chars.append(char)
            self.pos += 1

    def _code_unit(self) -> int:
        digits = self.text[self.pos + 1 : self.pos + 5]
        if len(digits) != 4 or not all(c in "0123456789abcdefABCDEF" for c in digits):
            raise _ParseError(self.pos, "invalid unicode escape")
        self.pos += 5
        return int(digits, 16)

    def _unicode_escape(self) -> str:
        """Decode `uXXXX` at the cursor; a UTF-16 surrogate pair becomes one character."""

        start = self.pos
        code = self._code_unit()
        if 0xDC00 <= code <= 0xDFFF:
            raise _ParseError(start, "unpaired low surrogate")
        if 0xD800 <= code <= 0xDBFF:
            if not self.text.startswith("\\u", self.pos):
                raise _ParseError(start, "unpaired high surrogate")
            self.pos += 1
            low = self._code_unit()
            if not 0xDC00 <= low <= 0xDFFF:
                raise _ParseError(start, "unpaired high surrogate")
            code = 0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00)
        return chr(code)

    def _number(self) -> int | float:
        match = _NUMBER.match(self.text, self.pos)
        if not match:
            raise _ParseError(self.pos, "invalid number")
        self.pos = match.end()
        literal = match.group(0)
        if any(c in literal for c in ".eE"):
            return float(literal)
        return int(literal)

    def _constructor(self, name: str, start: int) -> Any:
        self._expect("(")
        args: list[Any] = []
        self._skip_ws()
        if self._peek() != ")":
            while True:
                args.append(self._value())
                self._skip_ws()
                if self._peek() == ",":
                    self.pos += 1
                    continue
                break
        self._expect(")")
        return self.constructors[name](args, start)


def _single_arg(name: str, args: list[Any], position: int) -> Any:
    if len(args) != 1:
        raise _ParseError(position, f"{name}() takes exactly one argument")
    return args[0]


def _object_id(args: list[Any], position: int) -> dict[str, str]:
    value = _single_arg("ObjectId", args, position)
    if not isinstance(value, str) or not _OBJECT_ID.fullmatch(value):
        raise _ParseError(position, "ObjectId() expects a 24 character hex string")
    return {"$oid": value.lower()}


def _iso_date(args: list[Any], position: int) -> dict[str, str]:
    value = _single_arg("ISODate", args, position)
    if not isinstance(value, str):
        raise _ParseError(position, "ISODate() expects a string")
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise _ParseError(position, f"invalid ISO-8601 date '{value}'") from None
    return {"$date": value}


def _integer_arg(name: str, args: list[Any], position: int) -> int:
    value = _single_arg(name, args, position)
    if isinstance(value, bool):
        raise _ParseError(position, f"{name}() expects an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and re.fullmatch(r"[+-]?\d+", value.strip()):
        return int(value.strip())
    raise _ParseError(position, f"{name}() expects an integer")


def _number_long(args: list[Any], position: int) -> dict[str, str]:
    return {"$numberLong": str(_integer_arg("NumberLong", args, position))}


def _number_int(args: list[Any], position: int) -> int:
    value = _integer_arg("NumberInt", args, position)
    if not -(2**31) <= value < 2**31:
        raise _ParseError(position, "NumberInt() value out of 32-bit range")
    return value


def _number_decimal(args: list[Any], position: int) -> dict[str, str]:
    value = _single_arg("NumberDecimal", args, position)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise _ParseError(position, "NumberDecimal() expects a string or number")
    try:
        Decimal(str(value))
    except InvalidOperation:
        raise _ParseError(position, f"invalid decimal '{value}'") from None
    return {"$numberDecimal": str(value)}


def _fragment(text: str, position: int, radius: int = 20) -> str:
    return text[max(0, position - radius) : position + radius]


def parse_extended_json(text: str, *, field: str = "Body") -> Any:
    """Parse `text`; failures raise `QuerySyntaxError` naming `field`."""

    try:
        return _Parser(text).parse()
    except _ParseError as exc:
        raise QuerySyntaxError(field, _fragment(text, exc.position), exc.reason) from None


def parse_safely(field: str, text: str) -> dict[str, Any]:
    """Parse `text` that must hold a single document (object)."""

    value = parse_extended_json(text, field=field)
    if not isinstance(value, dict):
        raise QuerySyntaxError(field, _fragment(text, 0), "expected a document")
    return value
