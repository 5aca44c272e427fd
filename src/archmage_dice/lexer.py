from __future__ import annotations

import logging
import re

from .errors import LexError
from .models import TRANSITION_CHARS, Token, TokenKind


logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"\d+")
_DICE_RE = re.compile(r"(?P<count>\d*)d(?P<sides>\d+)")

_OPERATOR_KINDS = {
    "(": TokenKind.PAREN,
    ")": TokenKind.PAREN,
    "*": TokenKind.MULTIPLICATIVE_OP,
    "/": TokenKind.MULTIPLICATIVE_OP,
    "+": TokenKind.ADDITIVE_OP,
    "-": TokenKind.ADDITIVE_OP,
}


def classify(text: str) -> Token:
    """Turn one flushed buffer into a NUMBER or DICE token.

    A dice token with no count is canonicalized, so ``d20`` becomes ``1d20``.
    Raises LexError for anything else.
    """
    if _NUMBER_RE.fullmatch(text):
        return Token(TokenKind.NUMBER, text)

    m = _DICE_RE.fullmatch(text)
    if m:
        if not m.group("count"):
            text = "1" + text
        return Token(TokenKind.DICE, text)

    raise LexError(text)


def tokenize(raw: str) -> list[Token]:
    tokens: list[Token] = []
    pending: list[str] = []

    def flush() -> None:
        if pending:
            tokens.append(classify("".join(pending)))
            pending.clear()

    for char in raw:
        if char.isspace():
            flush()
            continue
        if char in TRANSITION_CHARS:
            flush()
            tokens.append(Token(_OPERATOR_KINDS[char], char))
            continue
        pending.append(char)

    # Input need not end on an operator.
    flush()

    logger.debug("tokenized %r into %d tokens", raw, len(tokens))
    return tokens
