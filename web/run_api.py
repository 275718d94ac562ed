"""Run the league API server. Run from project root: python web/run_api.py"""
import logging
import sys
from pathlib import Path

# Add project root to path so league imports work
_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_root))

import uvicorn

import config


def main():
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger = logging.getLogger("poolleague")
    missing = config.missing_settings()
    if missing:
        for name in missing:
            logger.error("Environment variable %s is not set.", name)
        sys.exit(1)
    logger.info("Server listening on port %s", config.PORT)
    uvicorn.run(
        "web.api.main:app",
        host="0.0.0.0",
        port=int(config.PORT),
        log_config=None,
    )


if __name__ == "__main__":
    main()
