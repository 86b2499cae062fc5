"""
Entry point for the User Management API
"""

import sys
import os
import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add src directory to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from users_api.app import create_app
from users_api.config.settings import Settings

settings = Settings.from_env()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = create_app(settings)

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting User Management API on port {settings.port}")
    # uvicorn exits nonzero when the lifespan startup (database connection) fails
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
