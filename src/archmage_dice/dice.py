from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone
from typing import Any, cast

from .errors import DiceError, ParseFailure
from .evaluator import Evaluator
from .lexer import tokenize
from .models import Node, RollResult, Token
from .parser import parse


logger = logging.getLogger(__name__)


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _require_text(text: str) -> None:
    if not text or not text.strip():
        raise DiceError("Empty input. Example: '3d6+(1d4/2)' or 'd20 + 5'.")


def normalized_expression(tokens: list[Token]) -> str:
    """Re-join tokens with single spaces, hugging the inside of parentheses."""
    chunks: list[str] = []
    for token in tokens:
        if chunks and chunks[-1] != "(" and token.text != ")":
            chunks.append(" ")
        chunks.append(token.text)
    return "".join(chunks)


def _build_tree(text: str) -> tuple[list[Token], Node]:
    _require_text(text)
    tokens = tokenize(text)
    result = parse(tokens)
    if not result.ok:
        raise ParseFailure(result.errors)
    # ok guarantees a tree.
    return tokens, cast(Node, result.tree)


def roll_expression(text: str, rng: random.Random | None = None) -> RollResult:
    """Lex, parse and evaluate ``text``.

    Raises DiceError (or a subclass) with a single descriptive message on any
    failure. Nothing is rolled unless the whole expression parsed cleanly.
    """
    try:
        _tokens, tree = _build_tree(text)
    except DiceError as e:
        logger.warning("rejected expression %r: %s", text, e)
        raise
    return Evaluator(rng).evaluate(tree)


def check_expression(text: str) -> dict[str, Any]:
    """Validate ``text`` without rolling anything."""
    try:
        tokens, _tree = _build_tree(text)
    except ParseFailure as e:
        return {"ok": False, "input": text, "normalized_expression": None, "errors": [str(err) for err in e.errors]}
    except DiceError as e:
        return {"ok": False, "input": text, "normalized_expression": None, "errors": [str(e)]}

    return {"ok": True, "input": text, "normalized_expression": normalized_expression(tokens), "errors": []}


def roll_from_text(text: str, rng: random.Random | None = None) -> dict[str, Any]:
    """Parse, validate, then roll. Raises DiceError for invalid input."""

    try:
        tokens, tree = _build_tree(text)
    except DiceError as e:
        logger.warning("rejected expression %r: %s", text, e)
        raise

    evaluator = Evaluator(rng)
    total, trace = evaluator.evaluate(tree)

    dice = [
        {
            "count": rolled.count,
            "sides": rolled.sides,
            "rolls": list(rolled.rolls),
            "subtotal": rolled.subtotal,
        }
        for rolled in evaluator.rolls
    ]

    logger.info("rolled %r => %d", text, total)

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "normalized_expression": normalized_expression(tokens),
        "rng": {
            "source": type(evaluator.rng).__name__,
            "nonce": str(uuid.uuid4()),
        },
        "dice": dice,
        "total": total,
        "trace": trace,
    }
