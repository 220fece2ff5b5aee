import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Configure logging
DEBUG_LOGGING = os.getenv("DEBUG_LOGGING", "false").lower() in ("true", "1", "yes")
LOG_LEVEL = logging.DEBUG if DEBUG_LOGGING else logging.INFO

logging.basicConfig(
    level=LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("statify")

# YouTube Data API
YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY", "")

# Socket timeout (seconds) applied to every API call
YOUTUBE_API_TIMEOUT = float(os.getenv("YOUTUBE_API_TIMEOUT", "30"))
