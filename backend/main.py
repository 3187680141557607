"""Main FastAPI application module."""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Import configuration
import config

# Import utilities
from utils import table


app = FastAPI(
    title="ashare-snowball",
    description="Health and ping endpoints for the A-share summary poster.",
    version="0.1.0",
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods are both plain 404s
    if exc.status_code in (404, 405):
        return JSONResponse({"error": "Not found"}, status_code=404)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.get("/health")
async def health():
    return {"ok": True}


@app.get("/api/ping")
async def ping():
    prefix = config.APP_PREFIX or config.DEFAULT_APP_PREFIX
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    # Example: table(prefix, "profiles") => "ashare-snowball__profiles"
    return {"pong": True, "time": now, "exampleTable": table(prefix, "profiles")}
