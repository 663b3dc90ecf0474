from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Header, HTTPException

from lp_tags.api.deps import get_default_api_key, get_return_tags_use_case
from lp_tags.api.schemas.tags import ContractTagResponse
from lp_tags.application.dto.return_tags import ReturnTagsInput
from lp_tags.application.use_cases.return_tags import ReturnTagsUseCase
from lp_tags.domain.exceptions import (
    ConfigurationError,
    PaginationStallError,
    RequestTimeoutError,
    SubgraphError,
    ValidationError,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/v1/tags/{chain_id}", response_model=list[ContractTagResponse])
def get_tags(
    chain_id: str,
    x_graph_api_key: str | None = Header(None),
    default_api_key: str = Depends(get_default_api_key),
    use_case: ReturnTagsUseCase = Depends(get_return_tags_use_case),
):
    api_key = x_graph_api_key if x_graph_api_key and x_graph_api_key.strip() else default_api_key
    try:
        result = use_case.execute(ReturnTagsInput(chain_id=chain_id, api_key=api_key or ""))
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ConfigurationError as exc:
        logger.warning("tags_router: configuration_error chain_id=%s detail=%s", chain_id, exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except RequestTimeoutError as exc:
        logger.warning("tags_router: subgraph_timeout chain_id=%s detail=%s", chain_id, exc)
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except (SubgraphError, PaginationStallError) as exc:
        logger.warning("tags_router: subgraph_failure chain_id=%s detail=%s", chain_id, exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    return [tag.to_dict() for tag in result.tags]
