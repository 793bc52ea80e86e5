import argparse
import logging
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, Response
from pydantic import BaseModel

from pseudofeed.errors import FeedError
from pseudofeed.feed_utils import FeedContext, build_context, share_link
from pseudofeed.main.config import Settings, split_address
from pseudofeed.main.tools.renderer import display_order

logger = logging.getLogger(__name__)


class ShareRequest(BaseModel):
    url: str = ""


def error_response(status_code: int, error: str, raw: Optional[str] = None) -> JSONResponse:
    body = {"error": error}
    if raw is not None:
        body["raw"] = raw
    return JSONResponse(status_code=status_code, content=body)


async def feed_error_handler(request: Request, exc: FeedError) -> JSONResponse:
    logger.error("%s %s failed: %s: %s", request.method, request.url.path, exc.message, exc)
    return error_response(500, exc.message, str(exc))


async def request_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(400, "Invalid request", str(exc))


def get_context(request: Request) -> FeedContext:
    return request.app.state.context


def create_app(context: Optional[FeedContext] = None) -> FastAPI:
    """Build the HTTP application around *context*.

    Without a context one is built from the environment, which is what
    ``uvicorn --factory pseudofeed.app_server:create_app`` relies on.
    """
    if context is None:
        context = build_context(Settings.from_env())

    app = FastAPI(
        title="pseudofeed",
        description="Save shared links to a personal JSON Feed.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.context = context
    app.add_exception_handler(FeedError, feed_error_handler)
    app.add_exception_handler(RequestValidationError, request_error_handler)

    @app.get("/feed.json", tags=["Feed"], summary="Raw feed document")
    def get_feed_json(ctx: FeedContext = Depends(get_context)) -> Response:
        return Response(content=ctx.store.read_raw(), media_type="application/json")

    @app.get("/bookmarklet", tags=["Feed"], summary="Bookmarklet for this server")
    def get_bookmarklet(request: Request, ctx: FeedContext = Depends(get_context)) -> Response:
        host = request.headers.get("host") or request.url.netloc
        script = ctx.renderer.render_bookmarklet(host)
        return Response(content=script, media_type="application/javascript")

    @app.get("/", tags=["Feed"], summary="Rendered feed", response_class=HTMLResponse)
    def get_page(ctx: FeedContext = Depends(get_context)) -> HTMLResponse:
        feed = ctx.store.load()
        page = ctx.renderer.render_page(display_order(feed), title=feed.title)
        return HTMLResponse(content=page)

    @app.post("/", tags=["Feed"], summary="Share a link")
    def post_link(req: ShareRequest, ctx: FeedContext = Depends(get_context)) -> Response:
        if not req.url.strip():
            return error_response(400, "URL is required")
        share_link(ctx, req.url)
        return Response(status_code=200)

    return app


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="pseudofeed – save shared links to a JSON Feed")
    ap.add_argument("--port", help="Port to run the server on (default: 8081)")
    ap.add_argument("--log-level", help="Log level (default: INFO)")
    return ap.parse_args(argv)


def main(argv: Optional[list] = None) -> None:
    args = parse_args(argv)
    settings = Settings.from_env(port=args.port, log_level=args.log_level)
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    host, port = split_address(settings.address)
    app = create_app(build_context(settings))
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
