"""
easy_orm Development Backend

FastAPI application serving in-memory REST collections in the envelope
format easy_orm models unwrap. Used for local development and end-to-end
tests of the store.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging
import os
import uvicorn

from easy_orm import __version__
from easy_orm.api.collection_endpoints import Envelope, router as collection_router


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="easy_orm Development Backend",
    description="In-memory REST collections for easy_orm models",
    version=__version__
)
app.include_router(collection_router)


@app.exception_handler(Exception)
async def envelope_exception_handler(request: Request, exc: Exception):
    """Report unhandled errors in the response envelope."""
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=500,
        content=Envelope(code=500, msg=str(exc)).model_dump()
    )


@app.get("/health", response_model=Envelope)
async def health() -> Envelope:
    return Envelope(resp={"status": "healthy", "version": __version__})


def main():
    """Run the development backend (EASY_ORM_BACKEND_PORT, default 8000)."""
    port = int(os.getenv("EASY_ORM_BACKEND_PORT", "8000"))
    logger.info(f"Starting easy_orm development backend on port {port}")
    uvicorn.run(app, host="127.0.0.1", port=port, log_level="info")


if __name__ == "__main__":
    main()
