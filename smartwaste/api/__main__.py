"""
smartwaste.api.__main__ — Entry point for ``python -m smartwaste.api``
========================================================================

Wiring:
1. Load .env (DATABASE_URL, CORS origins).
2. Configure logging.
3. Load config.yaml (port, throttle, seeding).
4. Serve the FastAPI app with uvicorn.  Tables, seed data and the rate
   limiter are set up by the app's lifespan hook.
"""

from __future__ import annotations

import logging

import uvicorn
from dotenv import load_dotenv

from smartwaste.config import load_config

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("smartwaste")


def main() -> None:
    """Bootstrap and run the SmartWaste API."""
    load_dotenv()

    cfg = load_config()
    logger.info("Config loaded — Community: %s", cfg.community_name)

    logger.info("Backend running on port %d", cfg.api_port)
    uvicorn.run("smartwaste.api.main:app", host="0.0.0.0", port=cfg.api_port, log_config=None)


if __name__ == "__main__":
    main()
