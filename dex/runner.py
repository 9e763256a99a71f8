"""
Round-trip arbitrage scanner loop.

Evaluates every configured token pair, pushes row updates to a presentation
sink and repeats on a timer. Pairs are independent; up to
``max_concurrency`` of them are evaluated at once.
"""

import asyncio
import time
from typing import List, Optional, Tuple

from roundtrip_arbitrage.config_loader import ScannerRuntimeConfig
from roundtrip_arbitrage.interfaces import PresentationSink, QuoteProvider
from roundtrip_arbitrage.utils import format_duration, get_logger

from .evaluator import ArbitrageEvaluator
from .presentation import (
    Colors,
    ConsoleTable,
    RowStyle,
    evaluation_to_row,
    progress_row,
    reset_row,
)
from .routes import format_route
from .types import ArbitrageEvaluation, Token

logger = get_logger(__name__)


def pair_key(from_token: Token, to_token: Token) -> str:
    return f"{from_token.symbol}/{to_token.symbol}"


class ArbitrageRunner:
    """
    Scans configured pairs for round-trip arbitrage.

    Owns no network resources; the quote provider is created and closed by
    the caller.
    """

    def __init__(
        self,
        config: ScannerRuntimeConfig,
        provider: QuoteProvider,
        sink: Optional[PresentationSink] = None,
        evaluator: Optional[ArbitrageEvaluator] = None,
    ):
        """
        Initialize runner with config.

        Args:
            config: Validated runtime configuration
            provider: Quote source shared by all evaluations
            sink: Where row updates go (defaults to a console table)
            evaluator: Optional pre-built evaluator (for tests)

        Raises:
            ConfigurationError: If a pair references an unknown token
        """
        self.config = config
        self.sink = sink if sink is not None else ConsoleTable()
        self.evaluator = evaluator or ArbitrageEvaluator(
            provider,
            network=config.network,
            loan_amount=config.loan_amount,
            margin_amount=config.margin_amount,
            normalizations=config.normalizations,
        )
        self.pairs: List[Tuple[Token, Token]] = [
            (config.token(a), config.token(b)) for a, b in config.pairs
        ]

        self.scan_count = 0
        self.last_opportunities: List[ArbitrageEvaluation] = []

    async def evaluate_pair(
        self, from_token: Token, to_token: Token
    ) -> ArbitrageEvaluation:
        """Evaluate one pair and publish its row updates."""
        key = pair_key(from_token, to_token)

        fields, style = reset_row()
        self.sink.update_row(key, fields, style)

        def show_progress(sell: Token, buy: Token) -> None:
            self.sink.update_row(key, *progress_row(sell.symbol, buy.symbol))

        evaluation = await self.evaluator.evaluate(
            from_token, to_token, on_leg=show_progress
        )

        fields, style = evaluation_to_row(evaluation, float(self.config.margin_amount))
        self.sink.update_row(key, fields, style)
        return evaluation

    async def scan_once(self) -> List[ArbitrageEvaluation]:
        """
        Evaluate all pairs once.

        Returns:
            Evaluations in pair order; a pair that raised is left out
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def guarded(from_token: Token, to_token: Token):
            async with semaphore:
                return await self.evaluate_pair(from_token, to_token)

        results = await asyncio.gather(
            *(guarded(a, b) for a, b in self.pairs), return_exceptions=True
        )

        evaluations = []
        for (from_token, to_token), result in zip(self.pairs, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                key = pair_key(from_token, to_token)
                logger.error(f"Evaluation of {key} failed: {result}", exc_info=result)
                self.sink.update_row(key, {"log": str(result)}, RowStyle.RED)
                continue
            evaluations.append(result)

        self.scan_count += 1
        self.last_opportunities = [e for e in evaluations if e.is_profitable]
        for opportunity in self.last_opportunities:
            self._log_opportunity(opportunity)

        return evaluations

    def _log_opportunity(self, evaluation: ArbitrageEvaluation) -> None:
        symbol_of = self.config.symbol_of
        logger.info(
            f"{evaluation.from_token} → {evaluation.to_token} → {evaluation.from_token} "
            f"+{evaluation.difference:.4f} ({evaluation.percentage:.2f}%) | "
            f"out: {format_route(evaluation.outbound_route, symbol_of)} | "
            f"back: {format_route(evaluation.return_route, symbol_of)}"
        )

    def print_results(self, evaluations: List[ArbitrageEvaluation], elapsed: float) -> None:
        """Print the table if the sink is a console table, then a summary line."""
        c = Colors
        if isinstance(self.sink, ConsoleTable):
            print(f"\n{self.sink.render()}")

        failed = sum(1 for e in evaluations if not e.succeeded)
        found = len(self.last_opportunities)
        color = c.GREEN if found else c.DIM
        print(
            f"  {c.BOLD}Scan #{self.scan_count}{c.RESET} "
            f"{color}{found} profitable{c.RESET} / {len(self.pairs)} pairs, "
            f"{failed} failed, {format_duration(elapsed)}"
        )

    def print_banner(self) -> None:
        c = Colors
        print(f"\n{c.CYAN}{'═' * 72}{c.RESET}")
        print(f"  {c.BOLD}ROUND-TRIP ARBITRAGE SCANNER{c.RESET}")
        print(
            f"  {c.DIM}Network:{c.RESET} {self.config.network}  "
            f"{c.DIM}Loan:{c.RESET} {self.config.loan_amount}  "
            f"{c.DIM}Margin:{c.RESET} {self.config.margin_amount}  "
            f"{c.DIM}Pairs:{c.RESET} {len(self.pairs)}"
        )
        print(f"{c.CYAN}{'═' * 72}{c.RESET}\n")

    async def run(self) -> None:
        """
        Main loop: scan, print, sleep.

        Runs indefinitely unless config.once=True.
        """
        if not self.pairs:
            raise RuntimeError("No token pairs configured")

        self.print_banner()

        while True:
            started = time.perf_counter()
            try:
                evaluations = await self.scan_once()
                self.print_results(evaluations, time.perf_counter() - started)
            except KeyboardInterrupt:
                raise
            except Exception as e:
                logger.error(f"Scan {self.scan_count + 1} failed: {e}", exc_info=True)
                if self.config.once:
                    raise

            if self.config.once:
                break

            await asyncio.sleep(self.config.poll_sec)
