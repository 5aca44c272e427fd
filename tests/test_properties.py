"""
Property-based tests using Hypothesis.

These check the lexer, parser and evaluator invariants over generated input.
"""

import random
import re

from hypothesis import given, settings
from hypothesis import strategies as st

from archmage_dice.dice import roll_expression
from archmage_dice.errors import DiceError
from archmage_dice.evaluator import evaluate
from archmage_dice.lexer import tokenize
from archmage_dice.models import DiceRoll, Token, TokenKind
from archmage_dice.parser import parse


digits = st.text(alphabet="0123456789", min_size=1, max_size=12)


@given(digits)
def test_digit_strings_lex_to_one_number(s: str) -> None:
    assert tokenize(s) == [Token(TokenKind.NUMBER, s)]


@given(st.text(alphabet="0123456789", max_size=4), digits)
def test_dice_strings_lex_to_one_dice_token(count: str, sides: str) -> None:
    assert tokenize(f"{count}d{sides}") == [Token(TokenKind.DICE, f"{count or '1'}d{sides}")]


@given(st.integers(min_value=0, max_value=50), st.integers(min_value=1, max_value=100), st.integers())
@settings(max_examples=200)
def test_dice_draws_stay_in_bounds(count: int, sides: int, seed: int) -> None:
    value, trace = evaluate(DiceRoll(count=count, sides=sides), rng=random.Random(seed))
    draws = [int(d) for d in re.findall(r"\d+", trace)]
    assert len(draws) == count
    assert all(1 <= d <= sides for d in draws)
    assert value == sum(draws)


@st.composite
def arithmetic(draw, depth: int = 0) -> str:
    if depth >= 3 or draw(st.booleans()):
        return str(draw(st.integers(min_value=0, max_value=99)))
    left = draw(arithmetic(depth + 1))
    right = draw(arithmetic(depth + 1))
    op = draw(st.sampled_from("+-*/"))
    expr = f"{left} {op} {right}"
    return f"({expr})" if draw(st.booleans()) else expr


@given(arithmetic())
@settings(max_examples=200)
def test_dice_free_evaluation_is_deterministic(text: str) -> None:
    result = parse(tokenize(text))
    assert result.ok
    assert evaluate(result.tree) == evaluate(result.tree)


@given(st.text(max_size=40))
@settings(max_examples=300)
def test_arbitrary_text_only_raises_dice_errors(text: str) -> None:
    try:
        roll_expression(text)
    except DiceError:
        pass
