"""Recursive-descent parser from tokens to an expression tree.

Grammar, lowest to highest binding::

    Expr    := Term
    Term    := Factor (('+' | '-') Factor)*
    Factor  := Primary (('*' | '/') Primary)*
    Primary := '(' Expr ')' | DICE | NUMBER

Structural problems are collected on ``Parser.errors`` instead of raised, so
one pass reports everything wrong with an expression. A subtree that could not
be built is ``None``, and any operator applied to it is ``None`` as well.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .config import settings
from .errors import InvariantError, ParseError
from .models import BinaryOp, Constant, DiceRoll, Node, Token, TokenKind


logger = logging.getLogger(__name__)


class _NestingTooDeep(Exception):
    pass


@dataclass(frozen=True)
class ParseResult:
    tree: Node | None
    errors: list[ParseError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.tree is not None and not self.errors


class Parser:
    def __init__(
        self,
        tokens: Iterable[Token],
        max_depth: int | None = None,
        max_dice_count: int | None = None,
        max_number_digits: int | None = None,
    ) -> None:
        self._tokens = list(tokens)
        self._current = 0
        self._exhausted = not self._tokens
        self._depth = 0
        self.max_depth = settings.max_nesting_depth if max_depth is None else max_depth
        self.max_dice_count = settings.max_dice_count if max_dice_count is None else max_dice_count
        self.max_number_digits = (
            settings.max_number_digits if max_number_digits is None else max_number_digits
        )
        self.errors: list[ParseError] = []

    def parse(self) -> ParseResult:
        if not self._tokens:
            self._error("Empty expression.")
            return ParseResult(None, self.errors)

        try:
            tree = self.expr()
        except _NestingTooDeep:
            self._error(f"Parentheses are nested more than {self.max_depth} deep.")
            tree = None
        else:
            leftover = self._peek()
            if leftover is not None:
                if leftover.text == ")":
                    self._error("Unmatched parenthesis.")
                else:
                    self._error(f"Unexpected token '{leftover.text}'.")

        logger.debug("parsed %d tokens with %d errors", len(self._tokens), len(self.errors))
        return ParseResult(tree, self.errors)

    def expr(self) -> Node | None:
        return self.term()

    def term(self) -> Node | None:
        expr = self.factor()
        while self._check(TokenKind.ADDITIVE_OP):
            operator = self._consume().text
            right = self.factor()
            expr = _fold(operator, expr, right)
        return expr

    def factor(self) -> Node | None:
        expr = self.primary()
        while self._check(TokenKind.MULTIPLICATIVE_OP):
            operator = self._consume().text
            right = self.primary()
            expr = _fold(operator, expr, right)
        return expr

    def primary(self) -> Node | None:
        token = self._peek()
        if token is None:
            self._error("Expression ended unexpectedly.")
            return None

        if token.kind is TokenKind.NUMBER:
            self._consume()
            if self._too_long(token.text, token):
                return None
            return Constant(self._to_int(token.text, token))

        if token.kind is TokenKind.DICE:
            self._consume()
            return self._dice(token)

        if token.kind is TokenKind.PAREN and token.text == "(":
            return self._group()

        # Operators and stray ')' cannot start a primary. Leave the token for
        # the enclosing loop so parsing can carry on past it.
        self._error(f"Unexpected token '{token.text}'.")
        return None

    def _group(self) -> Node | None:
        self._consume()
        if self._depth >= self.max_depth:
            raise _NestingTooDeep()

        self._depth += 1
        try:
            expr = self.expr()
        finally:
            self._depth -= 1

        if self._check(TokenKind.PAREN, ")"):
            self._consume()
            return expr

        self._error("Unmatched parenthesis.")
        return None

    def _dice(self, token: Token) -> DiceRoll | None:
        parts = token.text.split("d")
        if len(parts) != 2 or not parts[1].isdecimal():
            self._error(f'"{token.text}" was not recognized as a valid number or dice expression.')
            return None
        if self._too_long(parts[0], token) or self._too_long(parts[1], token):
            return None

        count = self._to_int(parts[0] or "1", token)
        sides = self._to_int(parts[1], token)

        if sides < 1:
            self._error(f'"{token.text}": a die needs at least one side.')
            return None
        if count > self.max_dice_count:
            self._error(f'"{token.text}": too many dice ({count}, max {self.max_dice_count}).')
            return None

        return DiceRoll(count=count, sides=sides)

    def _too_long(self, digits: str, token: Token) -> bool:
        if len(digits) <= self.max_number_digits:
            return False
        self._error(f'"{token.text[:20]}...": number too large (max {self.max_number_digits} digits).')
        return True

    def _to_int(self, text: str, token: Token) -> int:
        try:
            return int(text)
        except ValueError:
            # The lexer only emits digit-only numbers, so this is our bug.
            logger.error("token %r was not purely numeric", token)
            raise InvariantError(f"Found a number that was not purely numeric: '{token.text}'") from None

    def _peek(self) -> Token | None:
        if self._exhausted:
            return None
        return self._tokens[self._current]

    def _check(self, kind: TokenKind, text: str | None = None) -> bool:
        token = self._peek()
        if token is None or token.kind is not kind:
            return False
        return text is None or token.text == text

    def _consume(self) -> Token:
        token = self._tokens[self._current]
        # The cursor never moves past the last token; consuming it again
        # returns the same token.
        if self._current == len(self._tokens) - 1:
            self._exhausted = True
        else:
            self._current += 1
        return token

    def _error(self, detail: str) -> None:
        self.errors.append(ParseError(detail, position=self._current))


def _fold(operator: str, left: Node | None, right: Node | None) -> Node | None:
    if left is None or right is None:
        return None
    return BinaryOp(operator, left, right)  # type: ignore[arg-type]


def parse(
    tokens: Iterable[Token],
    *,
    max_depth: int | None = None,
    max_dice_count: int | None = None,
    max_number_digits: int | None = None,
) -> ParseResult:
    return Parser(
        tokens,
        max_depth=max_depth,
        max_dice_count=max_dice_count,
        max_number_digits=max_number_digits,
    ).parse()
