import logging

import uvicorn
from fastapi import FastAPI

from journeydesk.api.v1 import admin, dashboard, reports
from journeydesk.config import settings

logging.basicConfig(
    level=settings.api_log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="JourneyDesk API",
    openapi_url="/api/v1/openapi.json",
)

app.include_router(dashboard.router)
app.include_router(reports.router)
app.include_router(admin.router)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok"}


def run():
    logger.info(f"Starting JourneyDesk API on {settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "journeydesk.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=settings.api_workers,
        log_level=settings.api_log_level,
    )


if __name__ == "__main__":
    run()
