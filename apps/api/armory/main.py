from contextlib import asynccontextmanager
import os
import uuid
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from armory.core.errors import ArmoryError
from armory.core.obs import emit
from armory.core.security import get_admin_key
from armory.core.storage import storage_health
from armory.modules.catalogs.router import router as catalogs_router
from armory.modules.catalogs.service import get_catalogs
from armory.modules.characters.router import router as characters_router

APP_VERSION = os.getenv("APP_VERSION", "0.1.0")

_last_error: Optional[str] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    # admin key first: its one-time generation event must reach the operator
    get_admin_key()
    get_catalogs()
    yield


app = FastAPI(title="Character Armory API", version=APP_VERSION, lifespan=lifespan)

# Contract:
# - X-Request-Id in/out (missing -> generated; always echoed back; also on errors)
# - Error envelope keys: error, message, request_id, details


def _err_envelope(error: str, message: str, request_id: Optional[str], details: Any, status_code: int):
    headers = {}
    if request_id:
        headers["X-Request-Id"] = request_id
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id,
            "details": details,
        },
        headers=headers,
    )


@app.middleware("http")
async def _request_id_mw(request: Request, call_next):
    rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
    request.state.request_id = rid
    emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
    try:
        resp = await call_next(request)
    except Exception as e:
        emit("error", "http.request.exception", str(e), rid, __name__)
        raise
    resp.headers["X-Request-Id"] = rid
    emit("info", "http.request.end", f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}", rid, __name__)
    return resp


@app.exception_handler(ArmoryError)
async def _armory_exc_handler(request: Request, exc: ArmoryError):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    if exc.status_code >= 500:
        _last_error = f"{exc.code}: {exc.message}"
        emit("error", "http.request.failed", exc.message, rid, __name__, error=exc.code)
    return _err_envelope(exc.code, exc.message, rid, exc.details, exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("http_error", str(exc.detail), rid, {"status_code": exc.status_code}, exc.status_code)


@app.exception_handler(RequestValidationError)
async def _validation_exc_handler(request: Request, exc: RequestValidationError):
    rid = getattr(request.state, "request_id", None)
    return _err_envelope("validation_error", "request validation failed", rid, jsonable_encoder(exc.errors()), 422)


@app.exception_handler(Exception)
async def _unhandled_exc_handler(request: Request, exc: Exception):
    global _last_error
    rid = getattr(request.state, "request_id", None)
    _last_error = f"internal_error: {type(exc).__name__}"
    return _err_envelope("internal_error", "internal server error", rid, {"type": type(exc).__name__}, 500)


app.include_router(characters_router)
app.include_router(catalogs_router)


@app.get("/health")
def health():
    return {
        "status": "ok",
        "version": APP_VERSION,
        "storage": storage_health(),
        "catalogs": get_catalogs().counts(),
        "last_error_summary": _last_error,
    }
