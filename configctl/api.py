"""
HTTP binding of the store operations.

    PUT  /api/{key}/{value}                  -> set
    PUT  /api/{prefix}/{key}/{value}         -> set_for
    POST /api/{key}/{value}?delim=           -> add
    POST /api/{prefix}/{key}/{value}?delim=  -> add_for
    GET  /api/{key}                          -> get (404 if not found)
    GET  /api/{prefix}/{key}                 -> get_for (404 if not found)
    GET  /api/dump                           -> dump_env, optional JSON list body as filter
    GET  /api/{prefix}/dump                  -> dump_env_for, optional JSON list body as filter
"""
import logging
from typing import List, Optional

from fastapi import Body, FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from common.logging import get_uptime
from common.models import StatusResponse
from configctl.config import API_PREFIX
from configctl.store import Store

logger = logging.getLogger(__name__)

NOT_FOUND = "Not Found"


def create_api(store: Store, endpoint: str = "", port: int = 0) -> FastAPI:
    """
    Build the FastAPI application serving a store.

    Args:
        store: Store backing the API
        endpoint: Advertised base URL, reported by /status
        port: Bound port, reported by /status

    Returns:
        FastAPI: Application ready to be served
    """
    app = FastAPI(title="Config Controller API")

    # Request logging and recovery
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.debug(f"Request received: {request.method} {request.url}")

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error serving {request.method} {request.url.path}")
            return PlainTextResponse("Internal Server Error", status_code=500)

        logger.debug(f"Response sent: {response.status_code}")
        return response

    @app.get("/alive", response_class=PlainTextResponse)
    def alive():
        return "alive"

    @app.get("/status", response_model=StatusResponse)
    def status():
        stats = store.stats()
        return StatusResponse(
            endpoint=endpoint,
            port=port,
            scalars=stats["scalars"],
            namespaces=stats["namespaces"],
            uptime=get_uptime()
        )

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Dump routes go first: they would otherwise match /{key} and /{prefix}/{key}
    @app.get(API_PREFIX + "/dump")
    def dump(keys: Optional[List[str]] = Body(default=None)) -> List[str]:
        return store.dump_env(*(keys or []))

    @app.get(API_PREFIX + "/{prefix}/dump")
    def dump_for(prefix: str, keys: Optional[List[str]] = Body(default=None)) -> List[str]:
        return store.dump_env_for(prefix, *(keys or []))

    @app.get(API_PREFIX + "/{key}", response_class=PlainTextResponse)
    def get(key: str):
        value, ok = store.get(key)
        if ok:
            return PlainTextResponse(value)
        return PlainTextResponse(NOT_FOUND, status_code=404)

    @app.get(API_PREFIX + "/{prefix}/{key}", response_class=PlainTextResponse)
    def get_for(prefix: str, key: str):
        value, ok = store.get_for(prefix, key)
        if ok:
            return PlainTextResponse(value)
        return PlainTextResponse(NOT_FOUND, status_code=404)

    @app.put(API_PREFIX + "/{key}/{value}", response_class=PlainTextResponse)
    def set_value(key: str, value: str):
        store.set(key, value)
        return "ok"

    @app.put(API_PREFIX + "/{prefix}/{key}/{value}", response_class=PlainTextResponse)
    def set_for(prefix: str, key: str, value: str):
        store.set_for(prefix, key, value)
        return "ok"

    @app.post(API_PREFIX + "/{key}/{value}", response_class=PlainTextResponse)
    def add(key: str, value: str, delim: str = ""):
        store.add(key, value, delim)
        return "ok"

    @app.post(API_PREFIX + "/{prefix}/{key}/{value}", response_class=PlainTextResponse)
    def add_for(prefix: str, key: str, value: str, delim: str = ""):
        store.add_for(prefix, key, value, delim)
        return "ok"

    return app
