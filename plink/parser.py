"""Recursive-descent parser for the Plink language.

Every operator is written in prefix notation with a fixed number of
operands (`+ 1 2`, `not x`, `@ arr 0`); only function application is
postfix (`f(1)(2)`). Blocks are closed by `end`. There is no operator
precedence and no backtracking: each `parse_*` method either consumes
its whole construct or raises a `ParseError` at the offending token.

Newline and Comment tokens carry no grammatical meaning and are removed
by `significant_tokens` before the parser sees the stream.
"""

from __future__ import annotations

import sys
from typing import Iterable, List, Optional, Sequence, Set

from .ast import (
    Program, Expression, Statement, FalseLiteral, TrueLiteral, NumberLiteral,
    ArrayLiteral, FunctionLiteral, Identifier, Unary, Binary, Call,
    Branch, If, While, Assign, ArrayWrite, ArrayPush, ArrayPop, Return,
    ExpressionStatement,
)
from .errors import ParseError, Position
from .lexer import Token, TokenTag, tokenize


UNARY_OPERATORS = {TokenTag.NOT, TokenTag.NEG, TokenTag.VOID, TokenTag.HASH}

BINARY_OPERATORS = {
    TokenTag.PLUS, TokenTag.MINUS, TokenTag.STAR, TokenTag.SLASH, TokenTag.PERCENT,
    TokenTag.AND, TokenTag.OR, TokenTag.XOR,
    TokenTag.LESS_THAN, TokenTag.GREATER_THAN, TokenTag.LESS_EQUALS,
    TokenTag.GREATER_EQUALS, TokenTag.EQUALS_EQUALS, TokenTag.NOT_EQUALS,
    TokenTag.AT,
}

PRIMARY_STARTS = {
    TokenTag.FALSE, TokenTag.TRUE, TokenTag.NUMBER, TokenTag.BRACKET_OPEN,
    TokenTag.FN, TokenTag.IDENTIFIER,
}

EXPRESSION_STARTS = PRIMARY_STARTS | UNARY_OPERATORS | BINARY_OPERATORS

INSIGNIFICANT = {TokenTag.NEWLINE, TokenTag.COMMENT}

# Python frames available while parsing; each nested operator takes about three
PARSE_RECURSION_LIMIT = 10000


def significant_tokens(tokens: Iterable[Token]) -> List[Token]:
    """Drop Newline and Comment tokens from a lexed stream."""
    return [token for token in tokens if token.tag not in INSIGNIFICANT]


def describe(token: Optional[Token]) -> str:
    if token is None:
        return 'end of input'
    if token.tag == TokenTag.NUMBER:
        return f"number {token.value:g}"
    if token.tag == TokenTag.IDENTIFIER:
        return f"identifier {token.value!r}"
    return f"{token.tag.value!r}"


class Parser:
    def __init__(self, tokens: Sequence[Token]):
        self.tokens = significant_tokens(tokens)
        self.pos = 0

    def peek(self) -> Optional[Token]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def match(self, *tags: TokenTag) -> bool:
        token = self.peek()
        return token is not None and token.tag in tags

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def error_position(self, opener: Optional[Token] = None) -> Position:
        token = self.peek()
        if token is not None:
            return token.pos
        if opener is not None:
            return opener.pos
        if self.tokens:
            return self.tokens[-1].pos
        return Position(1, 1)

    def consume(self, tag: TokenTag, context: str, opener: Optional[Token] = None) -> Token:
        token = self.peek()
        if token is None or token.tag != tag:
            raise ParseError(
                f"expected {tag.value!r} {context}, got {describe(token)}",
                self.error_position(opener),
            )
        return self.advance()

    def parse_program(self) -> Program:
        statements: List[Statement] = []
        while self.peek() is not None:
            statements.append(self.parse_statement())
        return Program(statements)

    # Statements

    def parse_statement(self) -> Statement:
        token = self.peek()
        if token is None:
            raise ParseError("unexpected end of input", self.error_position())
        if token.tag == TokenTag.IF:
            return self.parse_if()
        if token.tag == TokenTag.WHILE:
            return self.parse_while()
        if token.tag == TokenTag.EQUALS:
            return self.parse_assignment()
        if token.tag == TokenTag.PUSH:
            return self.parse_push()
        if token.tag == TokenTag.POP:
            return self.parse_pop()
        if token.tag == TokenTag.RETURN:
            return self.parse_return()
        if token.tag in EXPRESSION_STARTS:
            value = self.parse_expression()
            return ExpressionStatement(value, token.pos)
        raise ParseError(f"unrecognized statement starting with {describe(token)}", token.pos)

    def parse_block(self, opener: Token, terminators: Set[TokenTag]) -> List[Statement]:
        """Parse statements up to (not including) one of `terminators`."""
        statements: List[Statement] = []
        while not self.match(*terminators):
            if self.peek() is None:
                raise ParseError(
                    f"expected 'end' to close {opener.tag.value!r}, got end of input",
                    opener.pos,
                )
            statements.append(self.parse_statement())
        return statements

    def parse_if(self) -> If:
        # if cond stmt* (elif cond stmt*)* (else stmt*)? end
        if_token = self.advance()
        branch_ends = {TokenTag.ELIF, TokenTag.ELSE, TokenTag.END}
        branches: List[Branch] = []
        condition = self.parse_operand(if_token)
        body = self.parse_block(if_token, branch_ends)
        branches.append(Branch(condition, body))
        while self.match(TokenTag.ELIF):
            elif_token = self.advance()
            condition = self.parse_operand(elif_token)
            body = self.parse_block(if_token, branch_ends)
            branches.append(Branch(condition, body))
        else_body: List[Statement] = []
        if self.match(TokenTag.ELSE):
            self.advance()
            else_body = self.parse_block(if_token, {TokenTag.END})
        self.consume(TokenTag.END, "to close 'if'", if_token)
        return If(branches, else_body, if_token.pos)

    def parse_while(self) -> While:
        while_token = self.advance()
        condition = self.parse_operand(while_token)
        body = self.parse_block(while_token, {TokenTag.END})
        self.consume(TokenTag.END, "to close 'while'", while_token)
        return While(condition, body, while_token.pos)

    def parse_assignment(self) -> Statement:
        # = name expr | = @ name index value
        equals = self.advance()
        if self.match(TokenTag.IDENTIFIER):
            name = self.advance().value
            value = self.parse_operand(equals)
            return Assign(name, value, equals.pos)
        if self.match(TokenTag.AT):
            self.advance()
            name = self.consume(TokenTag.IDENTIFIER, "after '= @'", equals).value
            index = self.parse_operand(equals)
            value = self.parse_operand(equals)
            return ArrayWrite(name, index, value, equals.pos)
        raise ParseError(
            f"expected identifier or '@' after '=', got {describe(self.peek())}",
            self.error_position(equals),
        )

    def parse_push(self) -> ArrayPush:
        push = self.advance()
        name = self.consume(TokenTag.IDENTIFIER, "after 'push'", push).value
        value = self.parse_operand(push)
        return ArrayPush(name, value, push.pos)

    def parse_pop(self) -> ArrayPop:
        pop = self.advance()
        name = self.consume(TokenTag.IDENTIFIER, "after 'pop'", pop).value
        return ArrayPop(name, pop.pos)

    def parse_return(self) -> Return:
        return_token = self.advance()
        value = self.parse_operand(return_token)
        return Return(value, return_token.pos)

    # Expressions

    def parse_operand(self, owner: Token) -> Expression:
        """Parse an expression that `owner` requires, failing if none follows."""
        if not self.match(*EXPRESSION_STARTS):
            raise ParseError(
                f"expected expression after {owner.tag.value!r}, got {describe(self.peek())}",
                self.error_position(owner),
            )
        return self.parse_expression()

    def parse_expression(self) -> Expression:
        node = self.parse_prefix()
        while self.match(TokenTag.PAREN_OPEN):
            paren = self.advance()
            args = self.parse_expression_list(paren, TokenTag.PAREN_CLOSE, "to close argument list")
            node = Call(node, args, paren.pos)
        return node

    def parse_expression_list(self, opener: Token, closer: TokenTag, context: str) -> List[Expression]:
        items: List[Expression] = []
        while True:
            if self.match(TokenTag.COMMA):
                self.advance()
                continue
            if self.match(closer):
                self.advance()
                return items
            if not self.match(*EXPRESSION_STARTS):
                raise ParseError(
                    f"expected {closer.value!r} {context}, got {describe(self.peek())}",
                    self.error_position(opener),
                )
            items.append(self.parse_expression())

    def parse_prefix(self) -> Expression:
        token = self.peek()
        if token is None:
            raise ParseError("unexpected end of input in expression", self.error_position())
        if token.tag in UNARY_OPERATORS:
            self.advance()
            operand = self.parse_operand(token)
            return Unary(token.tag.value, operand, token.pos)
        if token.tag in BINARY_OPERATORS:
            self.advance()
            left = self.parse_operand(token)
            right = self.parse_operand(token)
            return Binary(token.tag.value, left, right, token.pos)
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        token = self.peek()
        if token is None:
            raise ParseError("unexpected end of input in expression", self.error_position())
        if token.tag == TokenTag.FALSE:
            self.advance()
            return FalseLiteral(token.pos)
        if token.tag == TokenTag.TRUE:
            self.advance()
            return TrueLiteral(token.pos)
        if token.tag == TokenTag.NUMBER:
            self.advance()
            return NumberLiteral(token.value, token.pos)
        if token.tag == TokenTag.IDENTIFIER:
            self.advance()
            return Identifier(token.value, token.pos)
        if token.tag == TokenTag.BRACKET_OPEN:
            self.advance()
            values = self.parse_expression_list(token, TokenTag.BRACKET_CLOSE, "to close array literal")
            return ArrayLiteral(values, token.pos)
        if token.tag == TokenTag.FN:
            return self.parse_function()
        raise ParseError(f"unexpected {describe(token)} in expression", token.pos)

    def parse_function(self) -> FunctionLiteral:
        # fn ( ident* ) stmt* end
        fn_token = self.advance()
        self.consume(TokenTag.PAREN_OPEN, "after 'fn'", fn_token)
        params: List[str] = []
        while not self.match(TokenTag.PAREN_CLOSE):
            if self.match(TokenTag.COMMA):
                self.advance()
                continue
            param = self.consume(TokenTag.IDENTIFIER, "in parameter list", fn_token)
            if param.value in params:
                raise ParseError(f"duplicate parameter {param.value!r}", param.pos)
            params.append(param.value)
        self.advance()
        body = self.parse_block(fn_token, {TokenTag.END})
        self.consume(TokenTag.END, "to close 'fn'", fn_token)
        return FunctionLiteral(params, body, fn_token.pos)


def parse_tokens(tokens: Sequence[Token]) -> Program:
    """Parse an already lexed token stream into a Program AST."""
    if sys.getrecursionlimit() < PARSE_RECURSION_LIMIT:
        sys.setrecursionlimit(PARSE_RECURSION_LIMIT)
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        raise ParseError("expression nested too deeply", parser.error_position()) from None


def parse_program(source: str) -> Program:
    """Lex and parse Plink source code into a Program AST.

    Raises `LexicalError` on the first unrecognized character and
    `ParseError` on the first grammar violation.
    """
    return parse_tokens(tokenize(source))
