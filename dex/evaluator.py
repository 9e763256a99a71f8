"""
Round-trip arbitrage evaluation.

Quotes A -> B for the loan amount, feeds the exact output back into B -> A,
and calls the round trip profitable when the returned amount is strictly
greater than loan + margin. The decision is made on smallest-unit integers;
floats are only produced for display.
"""

from decimal import Decimal
from typing import Callable, Mapping, Optional, Union

from roundtrip_arbitrage.interfaces import QuoteProvider
from roundtrip_arbitrage.utils import format_units, get_logger, parse_units, rescale_units

from .routes import extract_route
from .types import ArbitrageEvaluation, QuoteFailure, Token

logger = get_logger(__name__)

OUTBOUND_LEG = "outbound"
RETURN_LEG = "return"


class ArbitrageEvaluator:
    """
    Evaluates one token pair per call against a quote provider.

    Evaluations share no mutable state, so many may run concurrently on the
    same evaluator.
    """

    def __init__(
        self,
        provider: QuoteProvider,
        network: int,
        loan_amount: Union[Decimal, str, int],
        margin_amount: Union[Decimal, str, int] = Decimal("0"),
        normalizations: Optional[Mapping[str, str]] = None,
    ):
        """
        Args:
            provider: Quote source used for both legs
            network: Chain id passed to the provider
            loan_amount: Amount of the source token to round-trip (whole tokens)
            margin_amount: Minimum gain in source token for a profitable trip
            normalizations: ``{native_address: wrapped_address}`` applied to routes
        """
        self.provider = provider
        self.network = network
        self.loan_amount = Decimal(str(loan_amount))
        self.margin_amount = Decimal(str(margin_amount))
        self.normalizations = dict(normalizations or {})

    async def evaluate(
        self,
        from_token: Token,
        to_token: Token,
        loan_amount: Optional[Union[Decimal, str, int]] = None,
        margin_amount: Optional[Union[Decimal, str, int]] = None,
        on_leg: Optional[Callable[[Token, Token], None]] = None,
    ) -> ArbitrageEvaluation:
        """
        Evaluate the round trip from_token -> to_token -> from_token.

        Args:
            from_token: Token borrowed and returned
            to_token: Intermediate token
            loan_amount: Optional override of the configured loan amount
            margin_amount: Optional override of the configured margin
            on_leg: Called with (sell_token, buy_token) before each quote

        Returns:
            A well-formed evaluation; quote failures are reported in it
        """
        loan = self.loan_amount if loan_amount is None else Decimal(str(loan_amount))
        margin = self.margin_amount if margin_amount is None else Decimal(str(margin_amount))

        base_amount = parse_units(loan, from_token.decimals)
        # Integer sum keeps the threshold exact
        threshold_amount = base_amount + parse_units(margin, from_token.decimals)

        if on_leg is not None:
            on_leg(from_token, to_token)
        outbound = await self.provider.request_quote(
            self.network, from_token, to_token, base_amount
        )
        if not outbound.ok:
            return self._failed(
                from_symbol=from_token.symbol,
                to_symbol=to_token.symbol,
                from_amount=float(format_units(base_amount, from_token.decimals)),
                base_amount=base_amount,
                threshold_amount=threshold_amount,
                failure=outbound,
                leg=OUTBOUND_LEG,
            )

        if on_leg is not None:
            on_leg(to_token, from_token)

        # The exact integer output of leg 1 is the input of leg 2
        inbound = await self.provider.request_quote(
            self.network, to_token, from_token, outbound.to_token_amount
        )
        if not inbound.ok:
            return self._failed(
                from_symbol=outbound.from_token.symbol,
                to_symbol=to_token.symbol,
                from_amount=float(
                    format_units(outbound.from_token_amount, outbound.from_token.decimals)
                ),
                base_amount=base_amount,
                threshold_amount=threshold_amount,
                failure=inbound,
                leg=RETURN_LEG,
            )

        final_amount = inbound.to_token_amount
        compare_threshold = threshold_amount
        if inbound.to_token.decimals != from_token.decimals:
            # Compare in the precision the provider used for the returned amount
            compare_threshold = rescale_units(
                threshold_amount,
                from_token.decimals,
                inbound.to_token.decimals,
                round_up=True,
            )
        is_profitable = compare_threshold < final_amount

        from_amount = float(
            format_units(outbound.from_token_amount, outbound.from_token.decimals)
        )
        to_amount = float(format_units(final_amount, inbound.to_token.decimals))
        difference = to_amount - from_amount
        percentage = difference / from_amount * 100 if from_amount else 0.0

        evaluation = ArbitrageEvaluation(
            from_token=outbound.from_token.symbol,
            to_token=outbound.to_token.symbol,
            is_profitable=is_profitable,
            outbound_route=extract_route(outbound.protocols, self.normalizations),
            return_route=extract_route(inbound.protocols, self.normalizations),
            from_token_amount=from_amount,
            to_token_amount=to_amount,
            difference=difference,
            percentage=percentage,
            base_amount=base_amount,
            threshold_amount=threshold_amount,
            final_amount=final_amount,
        )

        if is_profitable:
            logger.info(
                f"Profitable round trip {evaluation.from_token} → {evaluation.to_token}: "
                f"{from_amount:.4f} → {to_amount:.4f} ({percentage:+.2f}%)"
            )
        else:
            logger.debug(
                f"No edge {evaluation.from_token} → {evaluation.to_token}: "
                f"{difference:+.4f} ({percentage:+.2f}%)"
            )
        return evaluation

    def _failed(
        self,
        from_symbol: str,
        to_symbol: str,
        from_amount: float,
        base_amount: int,
        threshold_amount: int,
        failure: QuoteFailure,
        leg: str,
    ) -> ArbitrageEvaluation:
        logger.debug(f"{leg} leg failed for {from_symbol} → {to_symbol}: {failure.log_message}")
        return ArbitrageEvaluation(
            from_token=from_symbol,
            to_token=to_symbol,
            is_profitable=False,
            from_token_amount=from_amount,
            base_amount=base_amount,
            threshold_amount=threshold_amount,
            log=failure.log_message,
            failure=failure,
            failed_leg=leg,
        )
