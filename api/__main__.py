"""Command line interface for running the API server."""
import logging
import os

import uvicorn

from config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

def main():
    """Validate configuration, then serve the API until interrupted."""
    settings = get_settings()
    host = os.environ.get('LOOTBOX_HOST', '0.0.0.0')
    port = int(os.environ.get('LOOTBOX_PORT', '8000'))

    logger.info(
        f"Serving lootbox API on {host}:{port} "
        f"({len(settings.api_keys)} API keys for {settings.private_prefix})"
    )
    # loop="auto" picks uvloop when it is installed
    uvicorn.run(
        "api:app",
        host=host,
        port=port,
        loop="auto",
        log_level="info"
    )

if __name__ == "__main__":
    main()
