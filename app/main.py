from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from typing import Callable
from starlette.middleware.base import BaseHTTPMiddleware
import os
import uvicorn

from app.api.endpoints import contact
from app.core.config import settings
from app.core.exceptions import ContactRelayError
from app.core.logging import setup_logging
import logging
import json

logger = logging.getLogger(__name__)

with open(os.path.join(os.path.dirname(__file__), "log_config.json"), "r") as file:
    LOGGING_CONFIG = json.load(file)

setup_logging()

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Resource-Policy": "same-origin",
}


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds conservative security headers to every response."""

    async def dispatch(self, request: Request, call_next: Callable):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Relays website contact form submissions by email",
    version="0.1.0",
    debug=settings.DEBUG,
)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(
    contact.router,
    prefix=settings.API_PREFIX,
    tags=["contact"],
)


@app.get("/health", tags=["status"])
async def health():
    return {"ok": True}


@app.exception_handler(ContactRelayError)
async def contact_relay_exception_handler(request: Request, exc: ContactRelayError):
    content = {"error": exc.error}
    if exc.details and settings.INCLUDE_ERROR_DETAILS:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"send error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"error": "Failed to send"},
    )


if __name__ == "__main__":
    logger.info(f"Form server listening on {settings.PORT}")
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=LOGGING_CONFIG,
    )
