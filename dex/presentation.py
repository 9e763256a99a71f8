"""
Console presentation of arbitrage evaluations.

Maps evaluation values to partial row updates (pre-formatted display strings
plus a semantic color key) and renders them as a table, one row per pair.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from tabulate import tabulate

from roundtrip_arbitrage.utils import get_logger

from .types import ArbitrageEvaluation


# ANSI color codes for pretty output
class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"

    @staticmethod
    def strip(text: str) -> str:
        """Remove all ANSI codes from text."""
        return re.sub(r"\033\[[0-9;]+m", "", text)


class RowStyle:
    """Semantic color keys understood by the sinks."""

    WHITE = "white"
    RED = "red"
    GREEN = "green"
    DEFAULT = "default"


STYLE_CODES = {
    RowStyle.WHITE: Colors.WHITE,
    RowStyle.RED: Colors.RED,
    RowStyle.GREEN: Colors.GREEN,
    RowStyle.DEFAULT: "",
}

COLUMNS = [
    ("fromToken", "From"),
    ("toToken", "To"),
    ("fromAmount", "Amount"),
    ("toAmount", "Return"),
    ("difference", "Diff"),
    ("percentage", "%"),
    ("log", "Log"),
]

RowUpdate = Tuple[Dict[str, str], Optional[str]]


def color_difference(difference: float, margin: float) -> str:
    """Red below zero, yellow below the margin, green otherwise."""
    fixed = f"{difference:.1f}"
    if difference < 0:
        return f"{Colors.RED}{fixed}{Colors.RESET}"
    elif difference < margin:
        return f"{Colors.YELLOW}{fixed}{Colors.RESET}"
    return f"{Colors.GREEN}{fixed}{Colors.RESET}"


def color_percentage(percentage: float) -> str:
    fixed = f"{percentage:.1f}"
    if percentage < 0:
        return f"{Colors.RED}{fixed}{Colors.RESET}"
    return f"{Colors.GREEN}{fixed}{Colors.RESET}"


def _pad_colored(text: str, width: int) -> str:
    """Left-pad text to a visible width, ignoring ANSI codes."""
    visible = len(Colors.strip(text))
    return " " * max(0, width - visible) + text


def reset_row() -> RowUpdate:
    """Row update issued before a pair is evaluated."""
    return {"log": ""}, RowStyle.WHITE


def progress_row(from_symbol: str, to_symbol: str) -> RowUpdate:
    return {"log": f"Getting quote for {from_symbol} → {to_symbol}…"}, None


def evaluation_to_row(evaluation: ArbitrageEvaluation, margin: float) -> RowUpdate:
    """
    Map an evaluation to display fields and a style.

    Failed evaluations only carry symbols, the loan amount and the failure log.
    """
    fields = {
        "fromToken": evaluation.from_token.ljust(6),
        "toToken": evaluation.to_token.ljust(6),
    }
    if evaluation.from_token_amount is not None:
        fields["fromAmount"] = f"{evaluation.from_token_amount:.2f}".rjust(7)

    if not evaluation.succeeded:
        fields["log"] = evaluation.log
        return fields, RowStyle.RED

    fields.update(
        {
            "toAmount": f"{evaluation.to_token_amount:.2f}".rjust(7),
            "difference": _pad_colored(color_difference(evaluation.difference, margin), 7),
            "percentage": _pad_colored(color_percentage(evaluation.percentage), 5),
            "log": "",
        }
    )
    return fields, RowStyle.GREEN if evaluation.is_profitable else RowStyle.DEFAULT


class ConsoleTable:
    """
    Presentation sink keeping one merged row per pair.

    Partial updates merge into the existing row, so interleaved updates from
    concurrently evaluated pairs are safe as long as keys differ.
    """

    def __init__(self, tablefmt: str = "simple"):
        self.tablefmt = tablefmt
        self.rows: Dict[str, Dict[str, str]] = {}
        self.styles: Dict[str, str] = {}

    def update_row(
        self, key: str, fields: Dict[str, Any], style: Optional[str] = None
    ) -> None:
        row = self.rows.setdefault(key, {})
        row.update({k: str(v) for k, v in fields.items()})
        if style is not None:
            self.styles[key] = style

    def clear(self) -> None:
        self.rows.clear()
        self.styles.clear()

    def render(self) -> str:
        """Render all rows as a table, colored by row style."""
        table: List[List[str]] = []
        for key, row in self.rows.items():
            code = STYLE_CODES.get(self.styles.get(key, RowStyle.DEFAULT), "")
            cells = []
            for column, _ in COLUMNS:
                value = row.get(column, "")
                if code and value and column not in ("difference", "percentage"):
                    value = f"{code}{value}{Colors.RESET}"
                cells.append(value)
            table.append(cells)

        return tabulate(
            table,
            headers=[title for _, title in COLUMNS],
            tablefmt=self.tablefmt,
            disable_numparse=True,
        )


class LoggingSink:
    """Presentation sink that logs completed rows instead of drawing a table."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)

    def update_row(
        self, key: str, fields: Dict[str, Any], style: Optional[str] = None
    ) -> None:
        # Only result rows carry amounts; resets and progress are noise here
        if "fromAmount" not in fields:
            return
        text = " | ".join(
            Colors.strip(str(fields[column])).strip()
            for column, _ in COLUMNS
            if fields.get(column)
        )
        if style == RowStyle.RED:
            self.logger.warning(f"{key}: {text}")
        else:
            self.logger.info(f"{key}: {text}")
