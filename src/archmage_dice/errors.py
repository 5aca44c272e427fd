from __future__ import annotations


class DiceError(ValueError):
    """User-facing errors. The message always starts with a bracketed code."""

    code = "UNPARSEABLE_INPUT"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"[{self.code}] {detail}")


class LexError(DiceError):
    """A substring could not be classified as a number or dice expression."""

    code = "LEX_ERROR"

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f'"{text}" was not recognized as a valid number or dice expression.')


class ParseError(DiceError):
    """One structural problem found while parsing.

    These are collected by the parser rather than raised.
    """

    code = "PARSE_ERROR"

    def __init__(self, detail: str, position: int | None = None) -> None:
        self.position = position
        super().__init__(detail)


class ParseFailure(DiceError):
    code = "PARSE_ERROR"

    def __init__(self, errors: list[ParseError]) -> None:
        self.errors = list(errors)
        super().__init__(" ".join(e.detail for e in self.errors))


class InvariantError(DiceError):
    """The lexer/parser contract was broken. Never reachable from valid input."""

    code = "INTERNAL_ERROR"
