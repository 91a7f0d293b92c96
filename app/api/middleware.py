# app/api/middleware.py
import uuid

from fastapi import FastAPI, Request

from app.utils.logging import REQUEST_ID_CTX, get_logger

logger = get_logger(__name__)


def install_request_id(app: FastAPI) -> None:
    """X-Request-ID z naglowka albo nowy uuid4, widoczny w logach i odeslany w odpowiedzi."""

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = rid
        token = REQUEST_ID_CTX.set(rid)
        try:
            response = await call_next(request)
            logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        finally:
            REQUEST_ID_CTX.reset(token)
        response.headers["X-Request-ID"] = rid
        return response
