"""
TNBC CDS Hooks Service - FastAPI Application

HTTP front end for the advisory engine:
- CDS Hooks discovery (GET/OPTIONS /cds-services)
- Hook evaluation (POST /cds-services/{service_id})
- Liveness checks (/health, /inspect/http)
"""
from contextlib import asynccontextmanager
from datetime import datetime
import logging
from typing import Dict

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import ValidationError

from tnbc_cds.config import (
    CORS_ALLOW_ORIGINS,
    LOG_FILE,
    LOG_LEVEL,
    SERVICE_DESCRIPTION,
    SERVICE_HOOK,
    SERVICE_ID,
    SERVICE_PREFETCH,
    SERVICE_TITLE,
    VERSION,
)
from tnbc_cds.core.clinical import AdvisoryEngine
from tnbc_cds.models import (
    CDSHookRequest,
    CDSHookResponse,
    DiscoveryResponse,
    ErrorResponse,
    HealthResponse,
    ServiceDefinition,
)
from tnbc_cds.utils.exceptions import (
    CDSServiceError,
    InvalidRequestError,
    ServiceNotFoundError,
)
from tnbc_cds.utils.logging import setup_logging

logger = logging.getLogger(__name__)


# ---- Service registry ----

_SERVICES: Dict[str, ServiceDefinition] = {
    SERVICE_ID: ServiceDefinition(
        hook=SERVICE_HOOK,
        title=SERVICE_TITLE,
        description=SERVICE_DESCRIPTION,
        id=SERVICE_ID,
        prefetch=SERVICE_PREFETCH,
    ),
}

_ENGINES: Dict[str, AdvisoryEngine] = {
    SERVICE_ID: AdvisoryEngine(),
}

START_TIME = datetime.now()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(LOG_LEVEL, LOG_FILE or None)
    logger.info(f"CDS service ready: {', '.join(_SERVICES)}")
    yield
    logger.info("CDS service shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title="TNBC CDS Hooks Service",
    description="Order-select advisory cards for post-neoadjuvant triple-negative breast cancer",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---- Error handling ----

@app.exception_handler(CDSServiceError)
async def cds_error_handler(request: Request, exc: CDSServiceError):
    logger.warning(f"{request.method} {request.url.path} → {exc.status_code} {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "Internal server error.", "details": {}},
    )


# ---- Utility Functions ----

# First pydantic error type → client-facing message
_BODY_ERROR_MESSAGES: Dict[str, str] = {
    "json_invalid": "Request body is not valid JSON",
    "model_type": "Request body must be a JSON object",
}


async def _read_hook_body(request: Request) -> dict:
    """Parse and shape-check the hook request body in one pydantic pass."""
    raw = await request.body()
    try:
        hook_request = CDSHookRequest.model_validate_json(raw or b"{}")
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        message = _BODY_ERROR_MESSAGES.get(
            errors[0]["type"], "Request body does not match the CDS Hooks request shape"
        )
        raise InvalidRequestError(message, details={"errors": errors})
    return hook_request.model_dump(exclude_unset=True)


# ---- Health Endpoints ----

@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse(
        status="healthy",
        version=VERSION,
        service_count=len(_SERVICES),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
    )


@app.get("/inspect/http", response_class=PlainTextResponse, tags=["Health"])
async def inspect_http():
    """Plain-text check used when tunnelling the service for EHR sandboxes."""
    return "Inspect HTTP endpoint reached!"


# ---- CDS Hooks Endpoints ----

@app.options("/cds-services", tags=["CDS Hooks"])
async def discovery_preflight():
    return Response(
        status_code=200,
        headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
        },
    )


@app.get("/cds-services", response_model=DiscoveryResponse, tags=["CDS Hooks"])
async def discovery():
    """List the CDS services this server exposes."""
    return DiscoveryResponse(services=list(_SERVICES.values()))


@app.post(
    "/cds-services/{service_id}",
    response_model=CDSHookResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["CDS Hooks"],
)
async def call_service(service_id: str, request: Request):
    """
    Evaluate a hook invocation.

    Always returns 200 with zero or more cards for a well-formed body;
    missing prefetch data or patient id never fails the call.
    """
    engine = _ENGINES.get(service_id)
    if engine is None:
        raise ServiceNotFoundError(service_id)

    body = await _read_hook_body(request)
    return engine.evaluate(body)


# ---- Run with uvicorn ----
if __name__ == "__main__":
    from tnbc_cds.__main__ import main
    main()
