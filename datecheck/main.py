from __future__ import annotations

import logging
import time
import uuid
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .engine import run_date_rules
from .offset.types import OffsetCompileError, OffsetReferenceError
from .schemas import Trace, ValidateRequest, ValidateResponse
from .settings import get_settings

settings = get_settings()
logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"

app = FastAPI(title="Date offset rules")


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    return response


@app.get("/api/health")
def api_health():
    return {"status": "ok"}


def _build_error_payload(err: Exception, request_id: str) -> tuple[int, dict[str, Any]]:
    if isinstance(err, OffsetCompileError):
        status, code = 400, "rule_compile_error"
    elif isinstance(err, OffsetReferenceError):
        status, code = 400, "ref_resolution_error"
    else:
        status, code = 500, "internal_error"
    return status, {
        "error": code,
        "status": status,
        "detail": str(err) if status < 500 else "Internal validation error.",
        "trace": Trace(request_id=request_id).model_dump(),
    }


@app.post("/api/validate")
def api_validate(request: Request, payload: ValidateRequest):
    started = time.perf_counter()
    request_id = request.state.request_id
    try:
        report = run_date_rules(payload.data, payload.rules, payload.messages)
    except (OffsetCompileError, OffsetReferenceError) as e:
        logger.warning("Rejected rule set: %s", e)
        status, body = _build_error_payload(e, request_id)
        return JSONResponse(status_code=status, content=body)
    except Exception as e:
        logger.exception("Date rule validation crashed")
        status, body = _build_error_payload(e, request_id)
        return JSONResponse(status_code=status, content=body)

    trace = Trace(request_id=request_id, timings_ms={"total_ms": int((time.perf_counter() - started) * 1000)})
    resp = ValidateResponse(errors=report["errors"], trace=trace).model_dump(exclude_none=True)
    return JSONResponse(status_code=422 if resp["errors"] else 200, content=resp)


@app.get("/api/version")
def api_version():
    return {
        "APP_ENV": settings.APP_ENV,
        "version": APP_VERSION,
    }
