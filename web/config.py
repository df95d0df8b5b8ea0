"""Centralized configuration for the catalog web API."""

import os

# Flask app settings (allow env overrides; default debug off for safety)
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "5000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"

# Run the daily import inside the web process
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "False").lower() == "true"
