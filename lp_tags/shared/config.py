from __future__ import annotations

import json
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


SUPPORTED_CHAIN_IDS = ("1", "137", "42161", "43114")

CHAIN_ID_TO_KEY = {
    "1": "ETHEREUM",
    "137": "POLYGON",
    "42161": "ARBITRUM",
    "43114": "AVALANCHE",
}


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _json(name: str) -> dict:
    value = _env(name)
    if not value:
        return {}
    return json.loads(value)


@dataclass(frozen=True)
class Settings:
    graph_api_key: str
    graph_gateway_base: str
    subgraph_url_templates: dict
    supported_chain_ids: tuple
    graph_request_timeout_seconds: float
    log_level: str


def _build_url_templates(gateway_base: str) -> dict:
    base = gateway_base.rstrip("/")
    templates = {}
    for chain_id, key in CHAIN_ID_TO_KEY.items():
        subgraph_id = str(_env(f"SUSHI_SUBGRAPH_ID_{key}", "") or "").strip()
        if subgraph_id:
            templates[chain_id] = f"{base}/[api-key]/subgraphs/id/{subgraph_id}"
    overrides = _json("SUSHI_SUBGRAPH_URL_TEMPLATES")
    templates.update({str(chain_id): str(url) for chain_id, url in overrides.items()})
    return templates


def get_settings() -> Settings:
    gateway_base = _env("GRAPH_GATEWAY_BASE", "https://gateway.thegraph.com/api")
    return Settings(
        graph_api_key=_env("GRAPH_API_KEY", ""),
        graph_gateway_base=gateway_base,
        subgraph_url_templates=_build_url_templates(gateway_base),
        supported_chain_ids=SUPPORTED_CHAIN_IDS,
        graph_request_timeout_seconds=float(_env("GRAPH_REQUEST_TIMEOUT_SECONDS", "30")),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
