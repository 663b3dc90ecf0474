from __future__ import annotations

import logging
import re
from collections.abc import Collection, Mapping

from lp_tags.application.dto.return_tags import ReturnTagsInput, ReturnTagsOutput
from lp_tags.application.ports.liquidity_pool_source_port import LiquidityPoolSourcePort
from lp_tags.application.use_cases.collect_liquidity_pools import (
    DEFAULT_PAGE_SIZE,
    collect_liquidity_pools,
)
from lp_tags.domain.exceptions import ConfigurationError, ValidationError
from lp_tags.domain.services.contract_tags import build_contract_tags


logger = logging.getLogger(__name__)


API_KEY_PLACEHOLDER = "[api-key]"
_CHAIN_ID_RE = re.compile(r"[0-9]+")
_PLACEHOLDER_RE = re.compile(r"\[[^\[\]]+\]")


class ReturnTagsUseCase:
    def __init__(
        self,
        *,
        source_port: LiquidityPoolSourcePort,
        endpoint_templates: Mapping[str, str],
        supported_chain_ids: Collection[str],
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self._source_port = source_port
        self._endpoint_templates = dict(endpoint_templates)
        self._supported_chain_ids = frozenset(supported_chain_ids)
        self._page_size = page_size

    def execute(self, command: ReturnTagsInput) -> ReturnTagsOutput:
        chain_id = command.chain_id
        if not isinstance(chain_id, str) or not _CHAIN_ID_RE.fullmatch(chain_id):
            raise ValidationError(f"Invalid chain id: {chain_id}. Expected a decimal number.")
        if chain_id not in self._supported_chain_ids:
            raise ValidationError(f"Unsupported chain id: {chain_id}.")
        if not isinstance(command.api_key, str) or not command.api_key.strip():
            raise ValidationError("Missing API key.")

        endpoint = self._resolve_endpoint(chain_id, command.api_key.strip())

        block_number = self._source_port.fetch_indexed_block(endpoint=endpoint)
        pools = collect_liquidity_pools(
            self._source_port,
            endpoint=endpoint,
            block_number=block_number,
            page_size=self._page_size,
        )
        tags = build_contract_tags(chain_id, pools)

        logger.info(
            "return_tags: done chain_id=%s block=%s pools=%s tags=%s",
            chain_id,
            block_number,
            len(pools),
            len(tags),
        )
        return ReturnTagsOutput(
            chain_id=chain_id,
            block_number=block_number,
            pools_fetched=len(pools),
            tags=tags,
        )

    def _resolve_endpoint(self, chain_id: str, api_key: str) -> str:
        template = str(self._endpoint_templates.get(chain_id) or "").strip()
        if not template:
            raise ConfigurationError(f"No subgraph endpoint configured for chain id {chain_id}.")

        if _PLACEHOLDER_RE.search(template.replace(API_KEY_PLACEHOLDER, "")):
            raise ConfigurationError(
                f"Subgraph endpoint for chain id {chain_id} has an unresolved placeholder."
            )
        endpoint = template.replace(API_KEY_PLACEHOLDER, api_key)
        if API_KEY_PLACEHOLDER in endpoint:
            raise ConfigurationError(
                f"Subgraph endpoint for chain id {chain_id} has an unresolved placeholder."
            )
        return endpoint
