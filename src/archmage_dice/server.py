from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from .config import settings
from .dice import DiceError, check_expression, roll_from_text


logger = logging.getLogger("archmage_dice.server")

mcp = FastMCP("archmage-dice")


@mcp.tool()
def roll_dice(text: str):
    """Roll a dice or arithmetic expression.

    Input: text (string), e.g. '3d6+(1d4/2)', 'd20 + 5', '(2d8 + 4) * 2'
    Output: structured JSON with the total, a trace of every die rolled and
    audit details

    Supports + - * / (integer division) and parentheses. Dividing by zero
    yields 0 with 'ERROR: DIVIDE BY ZERO' in the trace.
    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text)
    except DiceError as e:
        # Surface stable error codes in the message.
        raise ValueError(str(e)) from None


@mcp.tool()
def check_dice_expression(text: str):
    """Check whether a dice expression is valid without rolling it.

    Returns every problem found, not just the first one.
    """

    return check_expression(text)


def run() -> None:
    # stdout is reserved for the stdio transport.
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info("starting archmage-dice MCP server")
    mcp.run()


if __name__ == "__main__":
    run()
