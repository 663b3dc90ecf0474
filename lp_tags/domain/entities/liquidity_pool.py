from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenDescriptor:
    id: str
    symbol: str | None
    name: str | None


@dataclass(frozen=True)
class LiquidityPool:
    id: str
    name: str | None
    symbol: str | None
    input_tokens: tuple[TokenDescriptor, ...] = ()
    output_token: TokenDescriptor | None = None
