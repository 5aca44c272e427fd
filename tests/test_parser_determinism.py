from archmage_dice.lexer import tokenize
from archmage_dice.parser import parse


def test_parse_is_deterministic():
    text = "3d6 + (1d4 / 2) * d8 - 1"
    a = parse(tokenize(text))
    b = parse(tokenize(text))

    assert a.ok and b.ok
    assert a.tree == b.tree
    assert a.errors == b.errors == []
