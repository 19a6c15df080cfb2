"""
Environment-backed settings.

Keys are read at call time so a `.env` loaded by rxconfig/state (or a test
monkeypatching os.environ) is always honoured.
"""
import os
from typing import List, Optional

from dotenv import load_dotenv

project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
load_dotenv(os.path.join(project_root, ".env"), override=False)

MAPS_KEY_VARS = ("MAPS_API_KEY", "GOOGLE_MAPS_API_KEY")
GEMINI_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"

# Zoom range accepted by the interactive zoom controls
MIN_ZOOM = 17
MAX_ZOOM = 21
DEFAULT_ZOOM = 19

# Fixed image size so the model always sees the same framing
DEFAULT_IMAGE_WIDTH = 1024
DEFAULT_IMAGE_HEIGHT = 576


def _first_env(names) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value and value.strip():
            return value.strip()
    return None


def get_maps_api_key() -> Optional[str]:
    return _first_env(MAPS_KEY_VARS)


def get_gemini_api_key() -> Optional[str]:
    return _first_env(GEMINI_KEY_VARS)


def get_gemini_model() -> str:
    return os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL


def missing_configuration() -> List[str]:
    """Names of the primary env vars whose key is not configured."""
    missing = []
    if not get_gemini_api_key():
        missing.append(GEMINI_KEY_VARS[0])
    if not get_maps_api_key():
        missing.append(MAPS_KEY_VARS[0])
    return missing
