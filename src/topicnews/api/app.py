"""FastAPI application entrypoint."""

from __future__ import annotations

from fastapi import FastAPI

from topicnews.api.routes import router


def create_app() -> FastAPI:
    app = FastAPI(title="Topic News", description="Topic listing and article scraper API")
    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
