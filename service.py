import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from api.github import handle_github_request
from api.image import handle_image_request
from api.svg import handle_svg_request
from request_utils import CORS_HEADERS, SECURITY_HEADERS, static_cache_headers

config.configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Greeting Card Images")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Mount static files directory
static_dir = os.path.join(config.PUBLIC_DIR, "static")
if os.path.isdir(static_dir):
    app.mount("/static", StaticFiles(directory=static_dir), name="static")
    logger.info("Serving static files from %s", static_dir)


@app.middleware("http")
async def add_default_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in {**CORS_HEADERS, **SECURITY_HEADERS}.items():
        response.headers.setdefault(name, value)
    if request.url.path.startswith("/static/") and response.status_code == 200:
        response.headers.update(static_cache_headers())
    return response


@app.exception_handler(StarletteHTTPException)
async def plain_text_http_error(request: Request, exc: StarletteHTTPException):
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


def _to_response(result) -> Response:
    status, headers, body = result
    return Response(content=body, status_code=status, headers=headers)


# Endpoints are plain functions so FastAPI runs them in its thread pool;
# the GitHub lookup blocks on network I/O.

@app.get("/image")
def image(request: Request):
    """Simple greeting card. See api.image.build_image_from_query for the parameters."""
    return _to_response(handle_image_request(dict(request.query_params)))


@app.get("/svg")
def svg(request: Request):
    """Animated greeting card."""
    return _to_response(handle_svg_request(dict(request.query_params)))


@app.get("/github")
def github(request: Request):
    """GitHub profile card, degrading to a fallback card when the lookup fails."""
    return _to_response(handle_github_request(dict(request.query_params)))


@app.get("/")
async def index():
    index_path = os.path.join(config.PUBLIC_DIR, "index.html")
    if not os.path.isfile(index_path):
        raise HTTPException(status_code=404, detail="Not Found")
    return FileResponse(index_path, media_type="text/html")
