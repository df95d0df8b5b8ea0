"""Flask app exposing the catalog product API."""

import base64
import os
import sys
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, Response, request

# Load environment variables from .env file (explicitly specify path)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Handle imports for both direct execution and package import
# When run directly (python web/app.py), __package__ is None
# When imported as module (from web.app import create_app), __package__ is "web"
if __package__ is None or __package__ == "":
    # Running directly - add project root to path for absolute imports
    sys.path.insert(0, str(Path(__file__).parent.parent))
    from web.api import api
    from web.config import ENABLE_SCHEDULER, FLASK_DEBUG, FLASK_HOST, FLASK_PORT
else:
    # Running as package
    from .api import api
    from .config import ENABLE_SCHEDULER, FLASK_DEBUG, FLASK_HOST, FLASK_PORT

from catalog.config import DB_PATH, FEED_PATH  # noqa: E402
from catalog.db import init_db  # noqa: E402
from catalog.logging_config import setup_logging  # noqa: E402
from catalog.scheduler import run_scheduler, scheduled_import  # noqa: E402
from catalog.shutdown import ShutdownHandler  # noqa: E402

__all__ = ["create_app"]


# ---------- BASIC AUTH ----------


def _basic_auth_creds() -> tuple[Optional[str], Optional[str]]:
    """Get API credentials from environment."""
    return os.getenv("API_USER"), os.getenv("API_PASS")


def _unauthorized() -> Response:
    return Response(
        "Authentication required",
        401,
        {"WWW-Authenticate": 'Basic realm="Login Required"'},
    )


def require_basic_auth() -> Optional[Response]:
    """
    Enforce HTTP Basic Auth for all routes.
    Skips enforcement if credentials are not configured (API_USER/API_PASS unset).
    """
    user, password = _basic_auth_creds()
    if not user or not password:
        return None  # auth disabled

    header = request.headers.get("Authorization", "")
    if not header.startswith("Basic "):
        return _unauthorized()

    try:
        decoded = base64.b64decode(header.split(" ", 1)[1]).decode("utf-8")
        username, passwd = decoded.split(":", 1)
    except (ValueError, UnicodeDecodeError):
        return _unauthorized()

    if username == user and passwd == password:
        return None
    return _unauthorized()


# ---------- APP FACTORY ----------


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """Build the Flask app.

    Args:
        config: Overrides for ``CATALOG_DB_PATH``, ``CATALOG_FEED_PATH`` and
            ``ENHANCEMENT_CLIENT`` (an ``EnhancementClient``; default built
            from environment)
    """
    flask_app = Flask(__name__)
    flask_app.config.update(
        CATALOG_DB_PATH=DB_PATH,
        CATALOG_FEED_PATH=FEED_PATH,
        ENHANCEMENT_CLIENT=None,
    )
    if config:
        flask_app.config.update(config)

    init_db(flask_app.config["CATALOG_DB_PATH"])
    flask_app.before_request(require_basic_auth)
    flask_app.register_blueprint(api)
    return flask_app


def _start_scheduler(flask_app: Flask) -> threading.Thread:
    """Run the daily import in a background thread."""
    db_path = flask_app.config["CATALOG_DB_PATH"]
    feed_path = flask_app.config["CATALOG_FEED_PATH"]
    thread = threading.Thread(
        target=run_scheduler,
        args=(lambda: scheduled_import(db_path, feed_path),),
        # Signal handlers can only be installed from the main thread
        kwargs={"shutdown": ShutdownHandler()},
        name="catalog-scheduler",
        daemon=True,
    )
    thread.start()
    return thread


if __name__ == "__main__":
    setup_logging()
    app = create_app()
    if ENABLE_SCHEDULER:
        _start_scheduler(app)
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
