"""
Placeholder handling for compiled statements.

Compiled statements always use `?` markers. Drivers that use the `format`
paramstyle (PyMySQL) need `%s` instead, and any literal `%` in the text must
be doubled so the driver's `%` interpolation leaves it alone. A `?` inside
a quoted literal is not a placeholder.
"""
import re
from dataclasses import dataclass
from enum import Enum, auto

_TOKENIZE = re.compile(r"""
    (?P<string>'(?:[^']|'')*'|"(?:[^"]|"")*"|`[^`]*`)
    |(?P<qmark>\?)
    |(?P<percent>%)
""", re.VERBOSE)


class TokenType(Enum):
    """Token types identified while scanning SQL."""
    SQL_TEXT = auto()
    STRING_LITERAL = auto()
    QMARK = auto()
    PERCENT = auto()


@dataclass(slots=True)
class Token:
    """Token from SQL scanning."""
    type: TokenType
    text: str


def tokenize_sql(sql: str) -> list[Token]:
    """Split SQL into text, quoted literals, `?` markers and `%` signs.
    """
    tokens = []
    last_end = 0

    for match in _TOKENIZE.finditer(sql):
        start, end = match.span()
        if start > last_end:
            tokens.append(Token(TokenType.SQL_TEXT, sql[last_end:start]))

        if match.group('string'):
            ttype = TokenType.STRING_LITERAL
        elif match.group('qmark'):
            ttype = TokenType.QMARK
        else:
            ttype = TokenType.PERCENT

        tokens.append(Token(ttype, match.group(0)))
        last_end = end

    if last_end < len(sql):
        tokens.append(Token(TokenType.SQL_TEXT, sql[last_end:]))

    return tokens


def count_placeholders(sql: str) -> int:
    """Count `?` markers outside quoted literals."""
    return sum(1 for token in tokenize_sql(sql) if token.type == TokenType.QMARK)


def standardize_placeholders(sql: str, placeholder: str = '?') -> str:
    """Rewrite `?` markers to `placeholder`.

    For the `%s` style every bare `%` is escaped as `%%`. Literal `%` inside
    quoted strings is escaped too, since the driver interpolates the whole
    statement text.
    """
    if not sql or placeholder == '?':
        return sql

    result = []
    for token in tokenize_sql(sql):
        if token.type == TokenType.QMARK:
            result.append(placeholder)
        elif token.type == TokenType.PERCENT:
            result.append('%%')
        elif token.type == TokenType.STRING_LITERAL:
            result.append(token.text.replace('%', '%%'))
        else:
            result.append(token.text)
    return ''.join(result)
