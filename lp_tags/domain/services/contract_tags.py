from __future__ import annotations

import logging
from collections.abc import Iterable

from lp_tags.domain.entities.contract_tag import ContractTag
from lp_tags.domain.entities.liquidity_pool import LiquidityPool


logger = logging.getLogger(__name__)


PROJECT_NAME = "Sushi"
WEBSITE_URL = "https://www.sushi.com/"
MAX_NAME_TAG_LENGTH = 45
ELLIPSIS = "..."


def truncate_label(text: str, max_length: int = MAX_NAME_TAG_LENGTH) -> str:
    if max_length < len(ELLIPSIS):
        raise ValueError(f"max_length must be at least {len(ELLIPSIS)}.")
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def build_contract_address(chain_id: str, address: str) -> str:
    return f"eip155:{chain_id}:{address}"


def build_contract_tags(chain_id: str, pools: Iterable[LiquidityPool]) -> list[ContractTag]:
    """Map pools to one tag per distinct LP token, first occurrence wins."""
    seen: set[str] = set()
    tags: list[ContractTag] = []
    skipped = 0

    for pool in pools:
        token = pool.output_token
        if token is None or not token.id or token.id in seen:
            skipped += 1
            continue
        seen.add(token.id)

        symbol = (token.symbol or "").strip()
        if not symbol:
            skipped += 1
            continue
        name = (token.name or "").strip()

        tags.append(
            ContractTag(
                contract_address=build_contract_address(chain_id, token.id),
                public_name_tag=truncate_label(f"{symbol} Pool"),
                project_name=PROJECT_NAME,
                ui_website_link=WEBSITE_URL,
                public_note=f"Sushi's {symbol} ({name}) pool contract.",
            )
        )

    logger.debug(
        "contract_tags: built chain_id=%s tags=%s skipped=%s",
        chain_id,
        len(tags),
        skipped,
    )
    return tags
