"""Tokenizer for the Plink language.

The lexer walks the source once, tracking line and column, and produces
tokens in source order. Newlines and `//` comments are emitted as tokens
of their own; the parser drops them before matching the grammar. The
first character that starts no token aborts the scan with a
`LexicalError` at its exact position.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .errors import LexicalError, Position


class TokenTag(Enum):
    # Keywords, in lookup order
    VOID = 'void'
    IF = 'if'
    ELIF = 'elif'
    ELSE = 'else'
    WHILE = 'while'
    END = 'end'
    FN = 'fn'
    RETURN = 'return'
    PUSH = 'push'
    POP = 'pop'
    NOT = 'not'
    AND = 'and'
    OR = 'or'
    XOR = 'xor'
    NEG = 'neg'
    FALSE = 'false'
    TRUE = 'true'

    COMMA = ','
    BRACKET_OPEN = '['
    BRACKET_CLOSE = ']'
    PAREN_OPEN = '('
    PAREN_CLOSE = ')'

    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    PERCENT = '%'

    EQUALS = '='
    LESS_THAN = '<'
    GREATER_THAN = '>'
    LESS_EQUALS = '<='
    GREATER_EQUALS = '>='
    EQUALS_EQUALS = '=='
    NOT_EQUALS = '!='

    AT = '@'
    HASH = '#'

    NUMBER = 'Number'
    IDENTIFIER = 'Identifier'
    COMMENT = 'Comment'
    NEWLINE = 'Newline'


KEYWORDS = (
    TokenTag.VOID, TokenTag.IF, TokenTag.ELIF, TokenTag.ELSE, TokenTag.WHILE,
    TokenTag.END, TokenTag.FN, TokenTag.RETURN, TokenTag.PUSH, TokenTag.POP,
    TokenTag.NOT, TokenTag.AND, TokenTag.OR, TokenTag.XOR, TokenTag.NEG,
    TokenTag.FALSE, TokenTag.TRUE,
)

TWO_CHAR_TOKENS = {
    '<=': TokenTag.LESS_EQUALS,
    '>=': TokenTag.GREATER_EQUALS,
    '==': TokenTag.EQUALS_EQUALS,
    '!=': TokenTag.NOT_EQUALS,
}

ONE_CHAR_TOKENS = {
    tag.value: tag for tag in (
        TokenTag.COMMA, TokenTag.BRACKET_OPEN, TokenTag.BRACKET_CLOSE,
        TokenTag.PAREN_OPEN, TokenTag.PAREN_CLOSE, TokenTag.PLUS, TokenTag.MINUS,
        TokenTag.STAR, TokenTag.SLASH, TokenTag.PERCENT, TokenTag.EQUALS,
        TokenTag.LESS_THAN, TokenTag.GREATER_THAN, TokenTag.AT, TokenTag.HASH,
    )
}

INLINE_WHITESPACE = ' \t\r'


@dataclass
class Token:
    tag: TokenTag
    line: int
    column: int
    # float for Number, text for Identifier and Comment
    value: Optional[Union[float, str]] = None

    @property
    def pos(self) -> Position:
        return Position(self.line, self.column)

    def describe(self) -> str:
        """Tag name plus payload, as shown by `plink --tokens`."""
        name = ''.join(part.capitalize() for part in self.tag.name.split('_'))
        if self.tag in KEYWORDS:
            name = 'Key' + name
        if self.value is None:
            return name
        if self.tag == TokenTag.NUMBER:
            return f"{name} {self.value:g}"
        return f"{name} {self.value}"


def is_identifier_start(c: str) -> bool:
    return ('a' <= c <= 'z') or ('A' <= c <= 'Z') or c == '_'


def is_identifier_middle(c: str) -> bool:
    return is_identifier_start(c) or is_digit(c)


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


def tokenize(source: str) -> List[Token]:
    """Convert Plink source text into a list of tokens.

    Spaces, tabs and carriage returns are skipped; `\\n` becomes a
    Newline token. A comment runs from `//` to the end of the line and
    its text (leading blanks removed) is the Comment payload. Numbers are
    digit runs with at most one `.`; a second dot ends the number.
    """
    tokens: List[Token] = []
    i = 0
    line = 1
    col = 1
    length = len(source)

    def peek(offset: int = 0) -> str:
        j = i + offset
        return source[j] if j < length else ''

    def advance(n: int = 1):
        nonlocal i, col, line
        for _ in range(n):
            if i < length and source[i] == '\n':
                line += 1
                col = 1
            else:
                col += 1
            i += 1

    def skip_whitespace():
        while i < length and source[i] in INLINE_WHITESPACE:
            advance()

    while True:
        skip_whitespace()
        if i >= length:
            return tokens
        c = source[i]
        # Newline
        if c == '\n':
            tokens.append(Token(TokenTag.NEWLINE, line, col))
            advance()
            continue
        # Comment
        if c == '/' and peek(1) == '/':
            start_line, start_col = line, col
            advance(2)
            skip_whitespace()
            start_i = i
            while i < length and source[i] != '\n':
                advance()
            tokens.append(Token(TokenTag.COMMENT, start_line, start_col, source[start_i:i]))
            continue
        # Identifiers or keywords
        if is_identifier_start(c):
            start_line, start_col = line, col
            start_i = i
            while i < length and is_identifier_middle(source[i]):
                advance()
            text = source[start_i:i]
            for keyword in KEYWORDS:
                if text == keyword.value:
                    tokens.append(Token(keyword, start_line, start_col))
                    break
            else:
                tokens.append(Token(TokenTag.IDENTIFIER, start_line, start_col, text))
            continue
        # Numbers
        if is_digit(c):
            start_line, start_col = line, col
            start_i = i
            has_dot = False
            advance()
            while i < length:
                if source[i] == '.':
                    if has_dot:
                        break
                    has_dot = True
                    advance()
                if not is_digit(peek()):
                    break
                advance()
            tokens.append(Token(TokenTag.NUMBER, start_line, start_col, float(source[start_i:i])))
            continue
        # Two-character operators win over their one-character prefixes
        pair = source[i:i + 2]
        if pair in TWO_CHAR_TOKENS:
            tokens.append(Token(TWO_CHAR_TOKENS[pair], line, col))
            advance(2)
            continue
        if c in ONE_CHAR_TOKENS:
            tokens.append(Token(ONE_CHAR_TOKENS[c], line, col))
            advance()
            continue
        raise LexicalError(f"unrecognized character {c!r}", Position(line, col))
