from __future__ import annotations

import json
import logging

import httpx
import pytest

from lp_tags.application.dto.return_tags import ReturnTagsInput
from lp_tags.application.use_cases.return_tags import ReturnTagsUseCase
from lp_tags.domain.entities.liquidity_pool import LiquidityPool, TokenDescriptor
from lp_tags.domain.exceptions import (
    ConfigurationError,
    QueryError,
    ValidationError,
)
from lp_tags.infrastructure.clients.sushi_subgraph_client import (
    SushiSubgraphClient,
    SushiSubgraphClientSettings,
)


TEMPLATES = {
    "1": "https://gateway.example/api/[api-key]/subgraphs/id/eth",
    "137": "https://gateway.example/api/[api-key]/subgraphs/id/polygon",
    "42161": "https://gateway.example/api/[api-key]/subgraphs/id/[subgraph-id]",
}
SUPPORTED = ("1", "137", "42161", "43114")


class FakeSource:
    def __init__(self, *, block: int = 123, pages: list[list[LiquidityPool]] | None = None):
        self._block = block
        self._pages = pages or [[]]
        self.block_calls: list[str] = []
        self.page_calls: list[dict] = []

    def fetch_indexed_block(self, *, endpoint: str) -> int:
        self.block_calls.append(endpoint)
        return self._block

    def fetch_pool_page(
        self,
        *,
        endpoint: str,
        last_id: str,
        block_number: int,
    ) -> list[LiquidityPool]:
        self.page_calls.append(
            {"endpoint": endpoint, "last_id": last_id, "block_number": block_number}
        )
        return self._pages[len(self.page_calls) - 1]


class FailingSource(FakeSource):
    def fetch_pool_page(self, *, endpoint: str, last_id: str, block_number: int) -> list[LiquidityPool]:
        _ = (endpoint, last_id, block_number)
        raise QueryError(["indexing error"])


def _use_case(source: FakeSource, *, page_size: int = 1000) -> ReturnTagsUseCase:
    return ReturnTagsUseCase(
        source_port=source,
        endpoint_templates=TEMPLATES,
        supported_chain_ids=SUPPORTED,
        page_size=page_size,
    )


def test_polygon_example_returns_single_tag():
    source = FakeSource(
        block=4242,
        pages=[
            [
                LiquidityPool(
                    id="0x01",
                    name="Sushi SLP",
                    symbol="SLP",
                    output_token=TokenDescriptor(id="0xaaa", symbol="SLP", name="Sushi LP Token"),
                ),
                LiquidityPool(id="0x02", name="No LP", symbol=None, output_token=None),
            ]
        ],
    )

    result = _use_case(source).execute(ReturnTagsInput(chain_id="137", api_key="secret"))

    assert [tag.to_dict() for tag in result.tags] == [
        {
            "Contract Address": "eip155:137:0xaaa",
            "Public Name Tag": "SLP Pool",
            "Project Name": "Sushi",
            "UI/Website Link": "https://www.sushi.com/",
            "Public Note": "Sushi's SLP (Sushi LP Token) pool contract.",
        }
    ]
    assert result.block_number == 4242
    assert result.pools_fetched == 2
    assert source.block_calls == ["https://gateway.example/api/secret/subgraphs/id/polygon"]
    assert source.page_calls[0]["block_number"] == 4242


def test_every_page_is_pinned_to_the_same_block():
    full_page = [LiquidityPool(id=f"0x{i:02x}", name=None, symbol=None) for i in range(1, 3)]
    source = FakeSource(block=99, pages=[full_page, []])

    _use_case(source, page_size=2).execute(ReturnTagsInput(chain_id="1", api_key="k"))

    assert [call["block_number"] for call in source.page_calls] == [99, 99]
    assert len(source.block_calls) == 1


@pytest.mark.parametrize("chain_id", ["9999", "abc", "", "1.0", " 1", "-1", "0x1", "１"])
def test_rejects_invalid_chain_id_without_network_calls(chain_id: str):
    source = FakeSource()

    with pytest.raises(ValidationError):
        _use_case(source).execute(ReturnTagsInput(chain_id=chain_id, api_key="secret"))

    assert source.block_calls == []
    assert source.page_calls == []


def test_unsupported_chain_error_mentions_chain_id():
    with pytest.raises(ValidationError, match="9999"):
        _use_case(FakeSource()).execute(ReturnTagsInput(chain_id="9999", api_key="secret"))


@pytest.mark.parametrize("api_key", ["", "   ", "\t\n"])
def test_rejects_blank_api_key(api_key: str):
    source = FakeSource()

    with pytest.raises(ValidationError):
        _use_case(source).execute(ReturnTagsInput(chain_id="1", api_key=api_key))

    assert source.block_calls == []


def test_supported_chain_without_template_is_configuration_error():
    source = FakeSource()

    with pytest.raises(ConfigurationError):
        _use_case(source).execute(ReturnTagsInput(chain_id="43114", api_key="secret"))

    assert source.block_calls == []


def test_unresolved_placeholder_is_configuration_error():
    source = FakeSource()

    with pytest.raises(ConfigurationError):
        _use_case(source).execute(ReturnTagsInput(chain_id="42161", api_key="secret"))

    assert source.block_calls == []


def test_source_errors_propagate_unchanged():
    with pytest.raises(QueryError) as exc_info:
        _use_case(FailingSource()).execute(ReturnTagsInput(chain_id="1", api_key="secret"))

    assert exc_info.value.messages == ["indexing error"]


def test_api_key_never_reaches_the_logs(caplog: pytest.LogCaptureFixture):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if "_meta" in body["query"]:
            return httpx.Response(200, json={"data": {"_meta": {"block": {"number": 8}}}})
        return httpx.Response(200, json={"data": {"liquidityPools": []}})

    client = SushiSubgraphClient(
        SushiSubgraphClientSettings(timeout_seconds=30),
        transport=httpx.MockTransport(handler),
    )
    use_case = ReturnTagsUseCase(
        source_port=client,
        endpoint_templates=TEMPLATES,
        supported_chain_ids=SUPPORTED,
    )

    with caplog.at_level(logging.DEBUG):
        result = use_case.execute(ReturnTagsInput(chain_id="1", api_key="SUPERSECRETKEY"))

    assert result.block_number == 8
    assert caplog.records
    assert not [
        record.getMessage() for record in caplog.records if "SUPERSECRETKEY" in record.getMessage()
    ]
