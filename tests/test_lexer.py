import pytest

from archmage_dice.errors import LexError
from archmage_dice.lexer import tokenize
from archmage_dice.models import Token, TokenKind


N = TokenKind.NUMBER
D = TokenKind.DICE
ADD = TokenKind.ADDITIVE_OP
MUL = TokenKind.MULTIPLICATIVE_OP
P = TokenKind.PAREN


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("42", [(N, "42")]),
        ("d20", [(D, "1d20")]),
        ("3d6", [(D, "3d6")]),
        ("3d6+(1d4/2)", [(D, "3d6"), (ADD, "+"), (P, "("), (D, "1d4"), (MUL, "/"), (N, "2"), (P, ")")]),
        ("((1))", [(P, "("), (P, "("), (N, "1"), (P, ")"), (P, ")")]),
        (" 2 *\t d8 -\n1 ", [(N, "2"), (MUL, "*"), (D, "1d8"), (ADD, "-"), (N, "1")]),
        ("1\xa02", [(N, "1"), (N, "2")]),
        ("", []),
        ("   ", []),
    ],
)
def test_tokenize(text, expected):
    assert tokenize(text) == [Token(kind, value) for kind, value in expected]


@pytest.mark.parametrize(
    ("text", "bad"),
    [
        ("2D6", "2D6"),
        ("1 + abc", "abc"),
        ("3d", "3d"),
        ("d", "d"),
        ("1.5", "1.5"),
        ("2d6d8", "2d6d8"),
        ("4 + x2", "x2"),
    ],
)
def test_tokenize_rejections(text, bad):
    with pytest.raises(LexError) as exc:
        tokenize(text)
    assert exc.value.text == bad
    assert str(exc.value) == f'[LEX_ERROR] "{bad}" was not recognized as a valid number or dice expression.'
