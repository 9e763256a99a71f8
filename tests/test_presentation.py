"""
Tests for console presentation of evaluations.
"""

import logging

import pytest

from dex.presentation import (
    Colors,
    ConsoleTable,
    LoggingSink,
    RowStyle,
    color_difference,
    evaluation_to_row,
    progress_row,
    reset_row,
)
from dex.types import ArbitrageEvaluation, FailureKind, QuoteFailure


def success(**overrides):
    values = dict(
        from_token="USDC",
        to_token="WETH",
        is_profitable=True,
        from_token_amount=1000.0,
        to_token_amount=1004.25,
        difference=4.25,
        percentage=0.425,
        base_amount=1_000_000_000,
        threshold_amount=1_002_500_000,
        final_amount=1_004_250_000,
    )
    values.update(overrides)
    return ArbitrageEvaluation(**values)


def failure():
    return ArbitrageEvaluation(
        from_token="USDC",
        to_token="WETH",
        is_profitable=False,
        from_token_amount=1000.0,
        log="400: Bad Request (insufficient liquidity)",
        failure=QuoteFailure(
            kind=FailureKind.PROVIDER,
            status=400,
            status_text="Bad Request",
            message="insufficient liquidity",
        ),
        failed_leg="outbound",
    )


class TestColorDifference:
    def test_negative_is_red(self):
        assert color_difference(-1.0, 2.5).startswith(Colors.RED)

    def test_below_margin_is_yellow(self):
        assert color_difference(1.0, 2.5).startswith(Colors.YELLOW)

    def test_at_margin_is_green(self):
        assert color_difference(2.5, 2.5).startswith(Colors.GREEN)

    def test_one_decimal(self):
        assert Colors.strip(color_difference(4.25, 0)) == "4.2"


class TestRowUpdates:
    def test_reset_row(self):
        assert reset_row() == ({"log": ""}, RowStyle.WHITE)

    def test_progress_row_keeps_style(self):
        fields, style = progress_row("USDC", "WETH")
        assert fields == {"log": "Getting quote for USDC → WETH…"}
        assert style is None

    def test_profitable_row(self):
        fields, style = evaluation_to_row(success(), margin=2.5)

        assert style == RowStyle.GREEN
        assert fields["fromToken"] == "USDC  "
        assert fields["fromAmount"] == "1000.00"
        assert fields["toAmount"] == "1004.25"
        assert Colors.strip(fields["difference"]).strip() == "4.2"
        assert Colors.strip(fields["percentage"]).strip() == "0.4"
        assert fields["log"] == ""

    def test_unprofitable_row_uses_default_style(self):
        _, style = evaluation_to_row(success(is_profitable=False, difference=1.0), margin=2.5)
        assert style == RowStyle.DEFAULT

    def test_padding_ignores_color_codes(self):
        fields, _ = evaluation_to_row(success(), margin=2.5)
        assert len(Colors.strip(fields["difference"])) == 7
        assert len(Colors.strip(fields["percentage"])) == 5

    def test_failed_row(self):
        fields, style = evaluation_to_row(failure(), margin=2.5)

        assert style == RowStyle.RED
        assert fields["log"] == "400: Bad Request (insufficient liquidity)"
        assert fields["fromAmount"] == "1000.00"
        assert "toAmount" not in fields
        assert "difference" not in fields


class TestConsoleTable:
    def test_partial_updates_merge(self):
        table = ConsoleTable()
        table.update_row("USDC/WETH", *reset_row())
        table.update_row("USDC/WETH", *progress_row("USDC", "WETH"))
        table.update_row("USDC/WETH", *evaluation_to_row(success(), margin=2.5))

        assert table.rows["USDC/WETH"]["log"] == ""
        assert table.rows["USDC/WETH"]["toAmount"] == "1004.25"
        assert table.styles["USDC/WETH"] == RowStyle.GREEN

    def test_style_kept_when_update_has_none(self):
        table = ConsoleTable()
        table.update_row("A/B", {"log": "x"}, RowStyle.RED)
        table.update_row("A/B", {"log": "y"})
        assert table.styles["A/B"] == RowStyle.RED

    def test_render_has_header_and_rows(self):
        table = ConsoleTable()
        table.update_row("USDC/WETH", *evaluation_to_row(success(), margin=2.5))
        table.update_row("DAI/WETH", *evaluation_to_row(failure(), margin=2.5))

        text = Colors.strip(table.render())

        assert "From" in text and "Return" in text
        assert "1004.25" in text
        assert "insufficient liquidity" in text

    def test_clear(self):
        table = ConsoleTable()
        table.update_row("A/B", {"log": "x"}, RowStyle.RED)
        table.clear()
        assert table.rows == {} and table.styles == {}


class TestLoggingSink:
    def test_only_result_rows_are_logged(self, caplog):
        sink = LoggingSink(logging.getLogger("test.sink"))
        with caplog.at_level(logging.INFO, logger="test.sink"):
            sink.update_row("USDC/WETH", *reset_row())
            sink.update_row("USDC/WETH", *progress_row("USDC", "WETH"))
            sink.update_row("USDC/WETH", *evaluation_to_row(success(), margin=2.5))

        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.INFO
        assert caplog.records[0].getMessage().startswith("USDC/WETH: USDC | WETH | 1000.00")
        assert "\033" not in caplog.records[0].getMessage()

    def test_failed_rows_are_warnings(self, caplog):
        sink = LoggingSink(logging.getLogger("test.sink.fail"))
        with caplog.at_level(logging.INFO, logger="test.sink.fail"):
            sink.update_row("USDC/WETH", *evaluation_to_row(failure(), margin=2.5))

        assert caplog.records[0].levelno == logging.WARNING
        assert "insufficient liquidity" in caplog.records[0].getMessage()


@pytest.mark.parametrize("text", ["\033[91m-1.0\033[0m", "plain"])
def test_strip_removes_ansi_codes(text):
    assert "\033" not in Colors.strip(text)
