# xcollab/main.py
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from xcollab.config import LOG_LEVEL
from xcollab.errors import (
    DataStoreError,
    LLMConfigError,
    LLMConnectionError,
    LLMResponseError,
    LLMUpstreamError,
)
from xcollab.metrics import REGISTRY
from xcollab.routes import routers

# ----------------------------------------------------------------------
# Logger configuration
# ----------------------------------------------------------------------
logger = logging.getLogger("xcollab")
logger.setLevel(LOG_LEVEL)
handler = logging.StreamHandler()
formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)
else:
    for h in logger.handlers:
        h.setFormatter(formatter)

# ----------------------------------------------------------------------
# FastAPI app + CORS
# ----------------------------------------------------------------------
app = FastAPI(
    title="XCollab",
    description="Hackathon catalogue with LLM-assisted ideas, proposals and team matching.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------
# Routers (single source of truth: xcollab/routes/__init__.py)
# ----------------------------------------------------------------------
for r in routers:
    app.include_router(r)

# ----------------------------------------------------------------------
# Metrics
# ----------------------------------------------------------------------
app.mount("/metrics", make_asgi_app(registry=REGISTRY))

# ----------------------------------------------------------------------
# Exception handlers
# ----------------------------------------------------------------------
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}"
    )
    detail = str(exc) if app.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": "internal_server_error", "detail": detail},
    )


@app.exception_handler(LLMConfigError)
async def llm_config_error_handler(request: Request, exc: LLMConfigError):
    logger.error(f"LLM misconfigured on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})


@app.exception_handler(LLMUpstreamError)
async def llm_upstream_error_handler(request: Request, exc: LLMUpstreamError):
    logger.error(f"LLM upstream error on {request.url.path}: {exc.status_code}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "LLM API returned error", "status": exc.status_code, "body": exc.body},
    )


@app.exception_handler(LLMConnectionError)
async def llm_connection_error_handler(request: Request, exc: LLMConnectionError):
    logger.error(f"LLM error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Server fetch error to LLM", "detail": str(exc)},
    )


@app.exception_handler(LLMResponseError)
async def llm_response_error_handler(request: Request, exc: LLMResponseError):
    logger.error(f"Unusable LLM answer on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "No content returned from LLM", "detail": str(exc)},
    )


@app.exception_handler(DataStoreError)
async def data_store_error_handler(request: Request, exc: DataStoreError):
    logger.error(f"Data store error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("xcollab.main:app", host="0.0.0.0", port=8000, reload=True)
