from __future__ import annotations

from lp_tags.application.use_cases.return_tags import ReturnTagsUseCase
from lp_tags.services.tags import build_return_tags_use_case
from lp_tags.shared.config import get_settings


def get_default_api_key() -> str:
    return get_settings().graph_api_key


def get_return_tags_use_case() -> ReturnTagsUseCase:
    return build_return_tags_use_case(get_settings())
