"""Docs blueprint: /openapi.json, /docs (Swagger UI), /redoc."""
from __future__ import annotations

from flask import Blueprint, Response, jsonify, url_for

from .openapi import API_TITLE, API_VERSION, build_openapi

bp = Blueprint("docs", __name__)

SWAGGER_UI_DIST = "https://unpkg.com/swagger-ui-dist@5"
REDOC_BUNDLE = "https://cdn.jsdelivr.net/npm/redoc@2/bundles/redoc.standalone.js"


def _page(title: str, head: str, body: str) -> Response:
    html = (
        "<!doctype html>\n"
        f'<html lang="en"><head><meta charset="utf-8"/><title>{title}</title>'
        f"<style>body{{margin:0;}}</style>{head}</head>\n"
        f"<body>{body}</body></html>\n"
    )
    return Response(html, mimetype="text/html")


@bp.get("/openapi.json")
def openapi_json() -> Response:
    return jsonify(build_openapi())


@bp.get("/docs")
def swagger_ui() -> Response:
    schema_url = url_for("docs.openapi_json")
    return _page(
        f"{API_TITLE} {API_VERSION}",
        f'<link rel="stylesheet" href="{SWAGGER_UI_DIST}/swagger-ui.css"/>',
        '<div id="swagger-ui"></div>'
        f'<script src="{SWAGGER_UI_DIST}/swagger-ui-bundle.js"></script>'
        f"<script>window.ui = SwaggerUIBundle({{url: '{schema_url}', dom_id: '#swagger-ui', "
        "deepLinking: true, displayRequestDuration: true});</script>",
    )


@bp.get("/redoc")
def redoc() -> Response:
    return _page(
        f"{API_TITLE} {API_VERSION} - ReDoc",
        f'<script src="{REDOC_BUNDLE}"></script>',
        f'<redoc spec-url="{url_for("docs.openapi_json")}" hide-download-button></redoc>',
    )
