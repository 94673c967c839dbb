"""Development server entrypoint.

    python backend/main.py

In production serve ``main:app`` with a WSGI server instead.
"""
from __future__ import annotations

import os

from user_api import create_app

app = create_app()


if __name__ == "__main__":
    app.run(
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8080")),
        debug=os.getenv("FLASK_DEBUG", "false").lower() == "true",
    )
