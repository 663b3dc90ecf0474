from __future__ import annotations

import logging

from lp_tags.application.ports.liquidity_pool_source_port import LiquidityPoolSourcePort
from lp_tags.domain.entities.liquidity_pool import LiquidityPool
from lp_tags.domain.exceptions import PaginationStallError


logger = logging.getLogger(__name__)


ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_PAGE_SIZE = 1000


def collect_liquidity_pools(
    source: LiquidityPoolSourcePort,
    *,
    endpoint: str,
    block_number: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[LiquidityPool]:
    """Read every pool at ``block_number``, one id-ordered page at a time.

    A page shorter than ``page_size`` ends the scan. Otherwise the last id of
    the page becomes the next exclusive lower bound; it has to differ from the
    current and the previous cursor or the scan aborts.
    """
    cursor = ZERO_ADDRESS
    previous_cursor: str | None = None
    pools: list[LiquidityPool] = []
    pages = 0

    while True:
        page = source.fetch_pool_page(
            endpoint=endpoint,
            last_id=cursor,
            block_number=block_number,
        )
        pages += 1
        pools.extend(page)
        if len(page) != page_size:
            break

        next_cursor = page[-1].id
        if not next_cursor or next_cursor == cursor or next_cursor == previous_cursor:
            logger.warning(
                "collect_liquidity_pools: cursor_stalled page=%s block=%s cursor=%s previous_cursor=%s next_cursor=%s",
                pages,
                block_number,
                cursor,
                previous_cursor,
                next_cursor,
            )
            raise PaginationStallError(
                f"Pagination cursor did not advance after page {pages}: "
                f"cursor={cursor!r} next={next_cursor!r}"
            )
        previous_cursor, cursor = cursor, next_cursor

    logger.info(
        "collect_liquidity_pools: fetched pools=%s pages=%s block=%s",
        len(pools),
        pages,
        block_number,
    )
    return pools
