from __future__ import annotations

from dataclasses import dataclass

from lp_tags.domain.entities.contract_tag import ContractTag


@dataclass(frozen=True)
class ReturnTagsInput:
    chain_id: str
    api_key: str


@dataclass(frozen=True)
class ReturnTagsOutput:
    chain_id: str
    block_number: int
    pools_fetched: int
    tags: list[ContractTag]
