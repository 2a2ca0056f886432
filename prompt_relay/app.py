# prompt_relay/app.py
"""
Local HTTP server emulating the Lambda Function URL in front of the handler.

  uvicorn prompt_relay.app:app --reload
  curl -XPOST localhost:8000/invoke -d '{"prompt": "How are you?"}'
"""

# Load .env BEFORE any prompt_relay imports (they read env vars at import time)
from dotenv import load_dotenv
load_dotenv(override=True)

import json

from fastapi import FastAPI, Request, Path
from fastapi.responses import JSONResponse, Response, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from prompt_relay import handler as handler_mod
from prompt_relay import monitoring
from prompt_relay import auth as authmod
from prompt_relay.storage import SqlArtifactStore

app = FastAPI(title="Prompt Relay (local Function URL)")

API_KEY_HEADER = "x-api-key"
INVOKE_PATH = "/invoke"


# ---------------------------------------------------------------------------
# Auth middleware (invocation boundary, /invoke only)
# ---------------------------------------------------------------------------
@app.middleware("http")
async def auth_middleware(request: Request, call_next):
    if request.url.path != INVOKE_PATH or not authmod.auth_required():
        return await call_next(request)

    api_key = request.headers.get(API_KEY_HEADER)
    if not api_key:
        return JSONResponse(status_code=401, content={"message": "Unauthorized"})
    if not authmod.is_key_allowed(api_key):
        return JSONResponse(status_code=403, content={"message": "Forbidden"})
    return await call_next(request)


def _function_url_event(request: Request, raw_body: bytes) -> dict:
    return {
        "version": "2.0",
        "rawPath": request.url.path,
        "rawQueryString": request.url.query,
        "headers": {k.lower(): v for k, v in request.headers.items()},
        "requestContext": {"http": {"method": request.method, "path": request.url.path}},
        "body": raw_body.decode("utf-8", errors="replace"),
        "isBase64Encoded": False,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
@app.api_route(INVOKE_PATH, methods=["GET", "POST"])
async def invoke(request: Request):
    """
    POST /invoke
    Body: { "prompt": "..." }  (any shape the handler accepts)
    """
    event = _function_url_event(request, await request.body())
    try:
        result = await run_in_threadpool(handler_mod.get_handler().handle, event)
    except Exception:
        # handle() logs its own failures; this also covers cold-start errors in get_handler()
        monitoring.logger.exception("Invocation failed", extra={"path": INVOKE_PATH})
        # Function URLs answer 502 without a custom body when the function errors
        return JSONResponse(status_code=502, content={"message": "Internal Server Error"})
    return Response(
        content=result.get("body", ""),
        status_code=result.get("statusCode", 200),
        headers=result.get("headers") or {},
    )


@app.get("/artifacts/{key:path}")
def get_artifact(key: str = Path(..., description="Artifact key, e.g. artifacts/http-run-...json")):
    store = handler_mod.get_handler().artifact_store
    body = store.get(key) if isinstance(store, SqlArtifactStore) else None
    if body is None:
        return JSONResponse(status_code=404, content={"key": key, "message": "Artifact not found"})
    return JSONResponse(status_code=200, content=json.loads(body))


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/metrics")
async def metrics():
    if not monitoring.PROMETHEUS_ENABLED:
        return PlainTextResponse("Prometheus disabled", status_code=404)
    payload, content_type = monitoring.prometheus_metrics_response()
    return Response(content=payload, media_type=content_type)
