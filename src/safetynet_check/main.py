"""
SafetyNet attestation verification service
FastAPI application exposing online verification of attestation statements
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, HTTPException

from .routers import attestation
from .services.attestation import get_config
from .utils.errors import error_handler

config = get_config()

# Configure logging
logging.basicConfig(level=config.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager owning the verification HTTP client"""
    config.log_config_summary()
    for issue in config.validate_config():
        logger.warning(f"Configuration issue: {issue}")

    app.state.http_client = httpx.AsyncClient(timeout=config.api_timeout)
    try:
        yield
    finally:
        await app.state.http_client.aclose()


app = FastAPI(
    title="SafetyNet Attestation Verifier",
    description="""
    ## SafetyNet Attestation Verifier

    Verifies SafetyNet attestation statements forwarded by Android clients.
    Statements are checked by Google's Android Device Verification API; only
    statements with a confirmed signature have their claims returned.

    ### Endpoints:
    - `POST /v1/attestation/verify` - Verify a statement and return its claims
    - `GET /health` - Liveness check
    """,
    version="1.0.0",
    lifespan=lifespan,
)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "api_key_configured": config.is_production_ready()}


app.add_exception_handler(HTTPException, error_handler)

app.include_router(attestation.router)
