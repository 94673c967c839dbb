"""Health check endpoints."""
from __future__ import annotations

from flask import Blueprint, current_app

from ...errors import ok
from ...repositories.factory import storage_status


bp = Blueprint("health", __name__)


@bp.get("/")
def alive():
    return ok({"status": "ok"}, "Service is alive")


@bp.get("/storage")
def storage():
    return ok(storage_status(current_app), "Storage status")
