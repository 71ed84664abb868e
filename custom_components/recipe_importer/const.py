"""Constants for the Recipe Importer integration."""

DOMAIN = "recipe_importer"

# Configuration and option keys (unified)
CONF_API_KEY = "api_key"
CONF_MODEL = "model"
CONF_DEFAULT_MODEL = "default_model"
CONF_GENERATION_TIMEOUT = "generation_timeout"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_FETCH_TIMEOUT = 10
DEFAULT_GENERATION_TIMEOUT = 60
DEFAULT_MAX_RESPONSE_SIZE = 5 * 1024 * 1024
DEFAULT_MAX_REDIRECTS = 5
DEFAULT_SERVINGS = 4

# Input limits
MIN_TEXT_LENGTH = 50
MAX_TEXT_LENGTH = 6000
MIN_PAGE_TEXT_LENGTH = 100
MAX_PAGE_TEXT_LENGTH = 15000
MAX_PHOTO_IMAGES = 5

# Available models
AVAILABLE_MODELS = [
    "gemini-2.5-flash",
    "gemini-2.5-flash-lite",
    "gemini-2.5-pro",
]

# Service names
SERVICE_EXTRACT_FROM_TEXT = "extract_from_text"
SERVICE_EXTRACT_FROM_URL = "extract_from_url"
SERVICE_EXTRACT_FROM_IMAGES = "extract_from_images"

# Event names
EVENT_EXTRACTION_STARTED = "recipe_importer_extraction_started"
EVENT_RECIPE_EXTRACTED = "recipe_importer_recipe_extracted"
EVENT_RECIPE_INCOMPLETE = "recipe_importer_recipe_incomplete"
EVENT_EXTRACTION_FAILED = "recipe_importer_extraction_failed"

# Service data keys
DATA_TEXT = "text"
DATA_URL = "url"
DATA_IMAGES = "images"
DATA_MODEL = "model"
DATA_SOURCE = "source"
DATA_RECIPE = "recipe"
DATA_PARTIAL_RECIPE = "partial_recipe"
DATA_ERROR = "error"
