from __future__ import annotations

from typing import Protocol

from lp_tags.domain.entities.liquidity_pool import LiquidityPool


class LiquidityPoolSourcePort(Protocol):
    def fetch_indexed_block(self, *, endpoint: str) -> int:
        ...

    def fetch_pool_page(
        self,
        *,
        endpoint: str,
        last_id: str,
        block_number: int,
    ) -> list[LiquidityPool]:
        ...
