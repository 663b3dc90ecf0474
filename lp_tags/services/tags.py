from __future__ import annotations

from lp_tags.application.dto.return_tags import ReturnTagsInput
from lp_tags.application.use_cases.return_tags import ReturnTagsUseCase
from lp_tags.domain.entities.contract_tag import ContractTag
from lp_tags.infrastructure.clients.sushi_subgraph_client import (
    SushiSubgraphClient,
    SushiSubgraphClientSettings,
)
from lp_tags.shared.config import Settings, get_settings


def build_return_tags_use_case(settings: Settings) -> ReturnTagsUseCase:
    client = SushiSubgraphClient(
        SushiSubgraphClientSettings(timeout_seconds=settings.graph_request_timeout_seconds)
    )
    return ReturnTagsUseCase(
        source_port=client,
        endpoint_templates=settings.subgraph_url_templates,
        supported_chain_ids=settings.supported_chain_ids,
    )


def return_tags(chain_id: str, api_key: str, *, settings: Settings | None = None) -> list[ContractTag]:
    """Fetch every Sushi pool on ``chain_id`` and return one tag per LP token."""
    use_case = build_return_tags_use_case(settings or get_settings())
    return use_case.execute(ReturnTagsInput(chain_id=chain_id, api_key=api_key)).tags
