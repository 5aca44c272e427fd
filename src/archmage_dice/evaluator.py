from __future__ import annotations

import logging
import random
import secrets

from .errors import InvariantError
from .models import BinaryOp, Constant, DiceRoll, Node, RolledDice, RollResult


logger = logging.getLogger(__name__)

DIVIDE_BY_ZERO_TRACE = "ERROR: DIVIDE BY ZERO"


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


class Evaluator:
    """Walks an expression tree, rolling dice as it goes.

    Each instance owns its random source, so concurrent evaluations never share
    a generator. Without an explicit ``rng`` a fresh ``secrets.SystemRandom`` is
    used. Every dice node rolled is recorded on ``rolls`` in roll order.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else secrets.SystemRandom()
        self.rolls: list[RolledDice] = []

    def evaluate(self, node: Node) -> RollResult:
        # Post-order walk with an explicit stack: a long chain like 1+1+...+1
        # folds into a tree as deep as it has terms.
        results: list[RollResult] = []
        stack: list[tuple[Node, bool]] = [(node, False)]

        while stack:
            current, children_done = stack.pop()

            if isinstance(current, Constant):
                results.append(RollResult(current.value, str(current.value)))
            elif isinstance(current, DiceRoll):
                results.append(self._roll(current))
            elif isinstance(current, BinaryOp):
                if children_done:
                    right = results.pop()
                    left = results.pop()
                    results.append(self._apply(current, left, right))
                else:
                    # Left is popped first, so its dice are rolled first.
                    stack.append((current, True))
                    stack.append((current.right, False))
                    stack.append((current.left, False))
            else:
                raise InvariantError(f"Cannot evaluate node of type {type(current).__name__}.")

        return results.pop()

    def _roll(self, node: DiceRoll) -> RollResult:
        draws = tuple(self.rng.randint(1, node.sides) for _ in range(node.count))
        self.rolls.append(RolledDice(count=node.count, sides=node.sides, rolls=draws))
        trace = "[" + ", ".join(str(d) for d in draws) + "]"
        return RollResult(sum(draws), trace)

    def _apply(self, node: BinaryOp, left_result: RollResult, right_result: RollResult) -> RollResult:
        left, left_trace = left_result
        right, right_trace = right_result

        if node.operator == "+":
            value = left + right
        elif node.operator == "-":
            value = left - right
        elif node.operator == "*":
            value = left * right
        elif node.operator == "/":
            if right == 0:
                # Poison value: the rest of the tree keeps evaluating with 0.
                logger.debug("division by zero")
                return RollResult(0, DIVIDE_BY_ZERO_TRACE)
            value = _truncating_div(left, right)
        else:
            raise InvariantError(f"Unknown operator '{node.operator}'.")

        return RollResult(value, f"{left_trace} {node.operator} {right_trace}")


def evaluate(node: Node, rng: random.Random | None = None) -> RollResult:
    return Evaluator(rng).evaluate(node)
