"""
Companion web server.

The hosting platform only keeps the container alive while something listens
on its port. This app serves a background image and a landing page from the
assets directory, and a short fallback page when the landing page is missing.
Every method is answered, so liveness checks using HEAD or POST get a 200.
"""

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, Response

logger = logging.getLogger(__name__)

FALLBACK_HTML = "<h1>404</h1><p>index.html not found, but the background service is running.</p>"

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(assets_dir: Path) -> FastAPI:
    """Build the FastAPI app serving files from ``assets_dir``."""
    assets_dir = Path(assets_dir)
    app = FastAPI(title="tunnelkeeper", docs_url=None, redoc_url=None, openapi_url=None)

    def landing_page() -> HTMLResponse:
        try:
            content = (assets_dir / "index.html").read_text(encoding="utf-8")
        except OSError:
            content = FALLBACK_HTML
        return HTMLResponse(content, media_type="text/html; charset=utf-8")

    # Plain def handlers run in the threadpool, off the pipeline's event loop
    @app.api_route("/bg.png", methods=["GET", "HEAD"])
    def background_image():
        """Serve the background image, or the landing page if it is unavailable."""
        image_path = assets_dir / "bg.png"
        if image_path.is_file():
            try:
                return Response(image_path.read_bytes(), media_type="image/png")
            except OSError as e:
                logger.error(f"Failed to read {image_path}: {e}")
        return landing_page()

    @app.api_route("/{path:path}", methods=ALL_METHODS, response_class=HTMLResponse)
    def index(path: str):
        """Serve the landing page for every other path and method."""
        return landing_page()

    return app
