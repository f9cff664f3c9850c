from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional

from .config import __version__, load_settings
from .models import SearchHit, DetailRecord, Episode, StreamSource
from .scraper import FaselScraper


def create_app(scraper: Optional[FaselScraper] = None) -> FastAPI:
    scraper = scraper or FaselScraper(load_settings())

    app = FastAPI(
        title="Fasel CLI API",
        description="REST API for FaselHD search, details, episodes and streams",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "domain": scraper.base_url, "proxy": scraper.settings.use_proxy}

    @app.get("/search", response_model=List[SearchHit])
    async def search(q: str = Query(..., min_length=1)):
        return await run_in_threadpool(scraper.search, q)

    @app.get("/details", response_model=DetailRecord)
    async def get_details(url: str = Query(...)):
        details = await run_in_threadpool(scraper.get_details, url)
        if not details:
            raise HTTPException(status_code=404, detail="Title not found")
        return details

    @app.get("/episodes", response_model=List[Episode])
    async def get_episodes(url: str = Query(...)):
        return await run_in_threadpool(scraper.get_episodes, url)

    @app.get("/stream", response_model=List[StreamSource])
    async def resolve_stream(url: str = Query(..., description="Movie or episode page URL")):
        return await run_in_threadpool(scraper.get_stream_url, url)

    return app


def __getattr__(name):
    # `uvicorn fasel.api:app` builds the app on first access, not at import
    if name == "app":
        app = create_app()
        globals()["app"] = app
        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
