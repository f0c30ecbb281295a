"""
ImageFX Playground API
FastAPI application exposing the upload -> generate -> download workflow

The application owns one shared HTTP client and one PlaygroundController for
the lifetime of the process.
"""

import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    API_BASE_URL,
    CORS_ORIGINS,
)
from .core import setup_logging, get_logger, clear_context
from .routes import playground_router
from .services.transport import ApiTransport
from .services.workflow import PlaygroundController

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    transport = ApiTransport()
    app.state.transport = transport
    app.state.controller = PlaygroundController(transport)
    logger.info("Playground API started", extra={"api_base": API_BASE_URL, "log_level": log_level})
    try:
        yield
    finally:
        await app.state.controller.shutdown()
        await transport.aclose()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    path = request.url.path
    logger.info(f"{request.method} {path}", extra={"request_id": request_id, "method": request.method})
    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.info(f"Response: {response.status_code}", extra={
            "request_id": request_id,
            "status_code": response.status_code,
        })
        return response
    finally:
        clear_context()


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(playground_router)


@app.get("/")
async def root():
    return {"message": API_TITLE, "version": API_VERSION}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "imagefx.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
    )
