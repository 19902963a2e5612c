"""FastAPI HTTP layer wrapping ScriptureEngine."""

from __future__ import annotations

import hmac
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from bible_search.engine import ScriptureEngine

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_KEY = os.getenv("API_KEY")


def create_app(engine: ScriptureEngine | None = None) -> FastAPI:
    """Build the app. Without an engine, one is compiled from $CORPUS_PATH
    at startup; a compilation failure aborts startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "engine", None) is None:
            app.state.engine = ScriptureEngine.load()
        yield

    app = FastAPI(
        title="Bible Search API",
        description="Verse lookup and full-text search over a compiled KJV corpus",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine

    if not API_KEY:
        logger.warning("API_KEY not set. All requests will be allowed.")

    @app.middleware("http")
    async def verify_api_key(request: Request, call_next):
        if API_KEY and request.url.path != "/health":
            key = request.headers.get("x-api-key", "")
            if not hmac.compare_digest(key, API_KEY):
                return JSONResponse(
                    status_code=401, content={"detail": "Invalid API key"}
                )
        return await call_next(request)

    def _engine(request: Request) -> ScriptureEngine:
        return request.app.state.engine

    @app.get("/health")
    def health():
        """Unauthenticated health check."""
        return {"status": "ok"}

    @app.get("/api/books")
    def list_books(request: Request):
        """List books in canonical order."""
        return [b.model_dump() for b in _engine(request).list_books()]

    @app.get("/api/books/{name}")
    def get_book(name: str, request: Request):
        """A book with its chapters and links to its neighbours."""
        detail = _engine(request).get_book(name)
        if detail is None:
            raise HTTPException(status_code=404, detail=f"'{name}' was not found.")
        return detail.model_dump()

    @app.get("/api/reference/{reference:path}")
    def get_reference(reference: str, request: Request, annotated: bool = False):
        """Verses for a reference such as 'John 3:16-18' or 'psalms.119.105'."""
        passage = _engine(request).get_passage(reference, annotated=annotated)
        if passage is None:
            raise HTTPException(
                status_code=404,
                detail=f"'{reference}' is not a valid Bible reference.",
            )
        return passage.model_dump()

    @app.get("/api/search")
    def search(request: Request, q: str = "", limit: int | None = None):
        """Search by reference or by words; never errors on bad input."""
        matches = _engine(request).search(q, limit)
        return {"matches": [m.model_dump() for m in matches]}

    @app.get("/api/sitemap")
    def sitemap(request: Request):
        return _engine(request).sitemap()

    @app.get("/sitemap.xml")
    def sitemap_xml(request: Request):
        return Response(
            content=_engine(request).sitemap_xml(), media_type="application/xml"
        )

    return app


app = create_app()


def main():
    """Run the API server."""
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
