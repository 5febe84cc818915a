"""Luau literal helpers.

Parsing itself is done by luaparser; these helpers cover what it leaves
to the caller.

Key functions:
- quote_string: Render a Python string as a Luau string literal
- unquote_string: Decode the escapes of a quoted string literal body
- is_identifier: Check whether a table key can be written unquoted
- strip_type_annotations: Blank out ``local name: Type`` annotations
"""

import re

KEYWORDS = frozenset(
    {
        "and", "break", "continue", "do", "else", "elseif", "end", "false",
        "for", "function", "if", "in", "local", "nil", "not", "or", "repeat",
        "return", "then", "true", "until", "while",
    }
)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ESCAPE = re.compile(
    r"\\(?:([abfnrtv\\\"'\n])|([0-9]{1,3})|x([0-9A-Fa-f]{2})|u\{([0-9A-Fa-f]+)\}|(z\s*)|(.?))",
    re.DOTALL,
)
_ANNOTATED_LOCAL = re.compile(r"^[ \t]*local[ \t]+[A-Za-z_][A-Za-z0-9_]*[ \t]*(:)", re.MULTILINE)

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    '"': '"',
    "'": "'",
    "\n": "\n",
}


def is_identifier(text: str) -> bool:
    """Check whether ``text`` can be used as a bare table key."""
    return _IDENTIFIER.fullmatch(text) is not None and text not in KEYWORDS


def quote_string(text: str) -> str:
    """Render ``text`` as a double-quoted Luau string literal."""
    out = ['"']
    for char in text:
        code = ord(char)
        if char == "\\":
            out.append("\\\\")
        elif char == '"':
            out.append('\\"')
        elif char == "\n":
            out.append("\\n")
        elif char == "\r":
            out.append("\\r")
        elif char == "\t":
            out.append("\\t")
        elif code < 0x20 or code == 0x7F:
            out.append(f"\\{code:03d}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)


def _decode_escape(match: re.Match[str]) -> str:
    simple, decimal, hex_code, unicode, _skip, unknown = match.groups()
    if simple is not None:
        return _SIMPLE_ESCAPES[simple]
    if decimal is not None:
        code = int(decimal)
        if code > 255:
            raise ValueError(f"escape sequence too large (\\{decimal})")
        return chr(code)
    if hex_code is not None:
        return chr(int(hex_code, 16))
    if unicode is not None:
        code = int(unicode, 16)
        if code > 0x10FFFF:
            raise ValueError("\\u escape out of range")
        return chr(code)
    if unknown is not None:
        raise ValueError(f"invalid escape sequence '\\{unknown}'")
    return ""


def unquote_string(body: str) -> str:
    """Decode the escape sequences in the body of a quoted string literal.

    Raises:
        ValueError: On unknown or out-of-range escapes
    """
    return _ESCAPE.sub(_decode_escape, body)


def strip_type_annotations(source: str) -> str:
    """Blank out Luau type annotations on ``local`` declarations.

    ``local assets: { [string]: Meta } = {`` becomes ``local assets = {``
    padded with spaces, so line and column numbers are preserved. Only
    annotations that close before a newline at bracket depth 0 are
    touched; anything else is left for the parser to report.
    """
    chars = list(source)
    for match in _ANNOTATED_LOCAL.finditer(source):
        start = match.start(1)
        depth = 0
        for position in range(start + 1, len(source)):
            char = source[position]
            if char in "{[(":
                depth += 1
            elif char in "}])":
                depth = max(depth - 1, 0)
            elif depth == 0 and char == "\n":
                break
            elif depth == 0 and char in "=,":
                for blank in range(start, position):
                    if chars[blank] != "\n":
                        chars[blank] = " "
                break
    return "".join(chars)
