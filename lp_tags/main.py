from __future__ import annotations

import logging

from fastapi import FastAPI

from lp_tags.api.routers.tags import router as tags_router
from lp_tags.api.schemas.tags import HealthResponse
from lp_tags.shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Sushi LP Tags API")
app.include_router(tags_router)


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")
