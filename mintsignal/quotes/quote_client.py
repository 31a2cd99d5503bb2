"""Jupiter-compatible swap quote API async client.

Quotes the expected output of selling a token into the configured quote
mint, and derives a spot price for price-history sampling.
"""

import asyncio
import logging
from typing import Optional

import httpx

from mintsignal.config import Config
from mintsignal.quotes.models import ProviderError, SwapQuote
from mintsignal.signals.amounts import slippage_bps

logger = logging.getLogger("mintsignal")

# Retry settings
_MAX_RETRIES = 2
_RETRY_BASE_DELAY = 0.5  # seconds; doubles each attempt
_RETRYABLE_STATUS_CODES = {502, 503, 504, 429}


class JupiterQuoteClient:
    """Async client wrapping the ``/quote`` endpoint."""

    def __init__(self, config: Config) -> None:
        self._config = config
        self._base_url = config.quote_api_url.rstrip("/")
        self._quote_mint = config.quote_mint
        self._probe_amount = config.price_probe_amount

    # ── Retry helper ─────────────────────────────────────────────────────

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs,
    ) -> httpx.Response:
        """Execute an HTTP request with exponential-backoff retry.

        Retries on transient server errors (502, 503, 504) and rate-limits
        (429).  Everything that still fails is raised as ``ProviderError``.
        """
        last_exc: Optional[Exception] = None

        for attempt in range(_MAX_RETRIES):
            try:
                async with httpx.AsyncClient() as client:
                    resp = await getattr(client, method)(
                        url,
                        timeout=10.0,
                        **kwargs,
                    )

                if resp.status_code in _RETRYABLE_STATUS_CODES:
                    delay = _RETRY_BASE_DELAY * (2 ** attempt)
                    logger.debug(
                        "Quote %s %s returned %d, retry %d/%d in %.1fs",
                        method.upper(), url, resp.status_code,
                        attempt + 1, _MAX_RETRIES, delay,
                    )
                    last_exc = ProviderError(
                        f"Quote API returned {resp.status_code}"
                    )
                    await asyncio.sleep(delay)
                    continue

                resp.raise_for_status()
                return resp

            except httpx.HTTPStatusError as exc:
                raise ProviderError(
                    f"Quote API returned {exc.response.status_code}"
                ) from exc
            except httpx.TransportError as exc:
                delay = _RETRY_BASE_DELAY * (2 ** attempt)
                logger.debug(
                    "Quote %s %s transport error (%s), retry %d/%d in %.1fs",
                    method.upper(), url, exc,
                    attempt + 1, _MAX_RETRIES, delay,
                )
                last_exc = ProviderError(f"Quote API unreachable: {exc}")
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

    # ── Quotes ───────────────────────────────────────────────────────────

    async def get_quote(
        self,
        input_mint: str,
        output_mint: str,
        amount: int,
        slippage_percent: float,
    ) -> SwapQuote:
        """Request a swap quote.

        Args:
            input_mint: Mint being sold.
            output_mint: Mint being bought.
            amount: Raw input amount.
            slippage_percent: Tolerance, e.g. ``20`` for 20 %.

        Returns:
            A parsed ``SwapQuote``.
        """
        bps = slippage_bps(slippage_percent)
        params = {
            "inputMint": input_mint,
            "outputMint": output_mint,
            "amount": str(amount),
            "slippageBps": bps,
        }
        resp = await self._request_with_retry(
            "get", f"{self._base_url}/quote", params=params,
        )

        try:
            data = resp.json()
            return SwapQuote(
                input_mint=data.get("inputMint", input_mint),
                output_mint=data.get("outputMint", output_mint),
                in_amount=int(data.get("inAmount", amount)),
                out_amount=int(data["outAmount"]),
                min_out_amount=int(data.get("otherAmountThreshold", data["outAmount"])),
                slippage_bps=int(data.get("slippageBps", bps)),
            )
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise ProviderError(f"Malformed quote payload: {exc}") from exc

    async def quote(
        self,
        instrument: str,
        input_amount: int,
        slippage_percent: float,
    ) -> int:
        """Expected raw quote-mint output for selling *input_amount* of *instrument*."""
        swap = await self.get_quote(
            instrument, self._quote_mint, input_amount, slippage_percent,
        )
        return swap.out_amount

    async def price(self, instrument: str) -> float:
        """Spot price as quote output per probe unit of *instrument*."""
        swap = await self.get_quote(
            instrument, self._quote_mint, self._probe_amount, 0,
        )
        if swap.in_amount <= 0:
            raise ProviderError(f"Quote for {instrument} has no input amount")
        return swap.out_amount / swap.in_amount
