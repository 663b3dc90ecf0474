from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import json
import logging
import time

import httpx

from lp_tags.domain.entities.liquidity_pool import LiquidityPool, TokenDescriptor
from lp_tags.domain.exceptions import (
    QueryError,
    RequestTimeoutError,
    SchemaError,
    TransportError,
)


logger = logging.getLogger(__name__)

# httpx logs each request URL at INFO and endpoints carry the API key in the path
logging.getLogger("httpx").setLevel(logging.WARNING)


INDEXED_BLOCK_QUERY = """
query IndexedBlock {
  _meta {
    block {
      number
    }
  }
}
"""

LIQUIDITY_POOLS_QUERY = """
query LiquidityPoolsPage($lastId: ID, $block: Int!) {
  liquidityPools(
    first: 1000,
    orderBy: id,
    orderDirection: asc,
    where: { id_gt: $lastId },
    block: { number: $block }
  ) {
    id
    name
    symbol
    inputTokens {
      id
      symbol
      name
    }
    outputToken {
      id
      symbol
      name
    }
  }
}
"""


@dataclass(frozen=True)
class SushiSubgraphClientSettings:
    timeout_seconds: float


class SushiSubgraphClient:
    def __init__(
        self,
        settings: SushiSubgraphClientSettings,
        *,
        transport: httpx.BaseTransport | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._settings = settings
        self._transport = transport
        self._clock = clock

    def fetch_indexed_block(self, *, endpoint: str) -> int:
        payload = self._post_graphql(url=endpoint, query=INDEXED_BLOCK_QUERY, variables={})
        data = payload.get("data") or {}
        meta = data.get("_meta") if isinstance(data, dict) else None
        block = meta.get("block") if isinstance(meta, dict) else None
        number = block.get("number") if isinstance(block, dict) else None
        if isinstance(number, bool) or not isinstance(number, int):
            raise SchemaError(f"Subgraph response has no numeric _meta.block.number: {number!r}")
        if number <= 0:
            raise SchemaError(f"Subgraph returned a non-positive block number: {number}")

        logger.info("sushi_subgraph_client: indexed_block block=%s", number)
        return number

    def fetch_pool_page(
        self,
        *,
        endpoint: str,
        last_id: str,
        block_number: int,
    ) -> list[LiquidityPool]:
        payload = self._post_graphql(
            url=endpoint,
            query=LIQUIDITY_POOLS_QUERY,
            variables={"lastId": last_id, "block": int(block_number)},
        )
        data = payload.get("data")
        if data is None:
            return []
        if not isinstance(data, dict):
            raise SchemaError("Subgraph response field 'data' is not an object.")
        rows = data.get("liquidityPools")
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise SchemaError("Subgraph response field 'liquidityPools' is not a list.")

        pools = [_map_pool(row) for row in rows]
        logger.debug(
            "sushi_subgraph_client: fetched_pool_page size=%s last_id=%s block=%s",
            len(pools),
            last_id,
            block_number,
        )
        return pools

    def _post_graphql(self, *, url: str, query: str, variables: dict) -> dict:
        timeout = self._settings.timeout_seconds
        deadline = self._clock() + timeout
        try:
            with httpx.Client(timeout=timeout, transport=self._transport) as client:
                with client.stream(
                    "POST",
                    url,
                    json={"query": query, "variables": variables},
                ) as response:
                    response.raise_for_status()
                    body = bytearray()
                    # overall deadline, httpx timeouts are per phase
                    for chunk in response.iter_bytes():
                        body.extend(chunk)
                        if self._clock() > deadline:
                            raise RequestTimeoutError(f"Subgraph request timed out after {timeout}s.")
            payload = json.loads(bytes(body))
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Subgraph request timed out after {timeout}s.") from exc
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Subgraph request failed with HTTP {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Subgraph request failed: {exc}") from exc
        except ValueError as exc:
            raise SchemaError("Subgraph response body is not valid JSON.") from exc

        if not isinstance(payload, dict):
            raise SchemaError("Subgraph response body is not a JSON object.")

        errors = payload.get("errors") or []
        if not isinstance(errors, list):
            errors = [errors]
        if errors:
            messages = [
                str(err.get("message", err)) if isinstance(err, dict) else str(err)
                for err in errors
            ]
            for message in messages:
                logger.error("sushi_subgraph_client: graphql_error message=%s", message)
            raise QueryError(messages)

        return payload


def _map_token(row: object, *, field_name: str) -> TokenDescriptor | None:
    if row is None:
        return None
    if not isinstance(row, dict):
        raise SchemaError(f"Subgraph field '{field_name}' is not an object.")
    token_id = row.get("id")
    if not isinstance(token_id, str):
        raise SchemaError(f"Subgraph field '{field_name}.id' is missing.")
    return TokenDescriptor(
        id=token_id,
        symbol=row.get("symbol"),
        name=row.get("name"),
    )


def _map_pool(row: object) -> LiquidityPool:
    if not isinstance(row, dict):
        raise SchemaError("Subgraph liquidity pool record is not an object.")
    pool_id = row.get("id")
    if not isinstance(pool_id, str):
        raise SchemaError("Subgraph liquidity pool record has no id.")

    input_tokens = []
    for token_row in row.get("inputTokens") or []:
        token = _map_token(token_row, field_name="inputTokens")
        if token is not None:
            input_tokens.append(token)

    return LiquidityPool(
        id=pool_id,
        name=row.get("name"),
        symbol=row.get("symbol"),
        input_tokens=tuple(input_tokens),
        output_token=_map_token(row.get("outputToken"), field_name="outputToken"),
    )
