from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, NamedTuple, TypeAlias


TRANSITION_CHARS = "+-*/()"

Operator: TypeAlias = Literal["+", "-", "*", "/"]


class TokenKind(Enum):
    NUMBER = "number"
    DICE = "dice"
    ADDITIVE_OP = "additive_op"
    MULTIPLICATIVE_OP = "multiplicative_op"
    PAREN = "paren"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str


@dataclass(frozen=True)
class Constant:
    value: int


@dataclass(frozen=True)
class DiceRoll:
    count: int
    sides: int


@dataclass(frozen=True)
class BinaryOp:
    operator: Operator
    left: Node
    right: Node


Node: TypeAlias = Constant | DiceRoll | BinaryOp


class RollResult(NamedTuple):
    value: int
    trace: str


@dataclass(frozen=True)
class RolledDice:
    count: int
    sides: int
    rolls: tuple[int, ...]

    @property
    def subtotal(self) -> int:
        return sum(self.rolls)
