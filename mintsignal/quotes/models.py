"""Quote data models and errors."""

from dataclasses import dataclass


class ProviderError(Exception):
    """A quote or price lookup failed (venue, network, or malformed payload)."""


@dataclass(frozen=True)
class SwapQuote:
    """A parsed swap quote from the quote API."""

    input_mint: str
    output_mint: str
    in_amount: int
    out_amount: int
    min_out_amount: int
    slippage_bps: int
