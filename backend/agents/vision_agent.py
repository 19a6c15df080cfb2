import base64
import json
import logging
from typing import Optional, Tuple

from google import genai
from google.genai import types

from backend.models.security_analysis import SecurityAnalysis
from backend.utils.config import get_gemini_api_key, get_gemini_model
from backend.utils.errors import ErrorKind, SurveyError

logger = logging.getLogger(__name__)

ANALYSIS_FAILED_MESSAGE = "Failed to perform security analysis. The AI model may be unable to process the request."

SECURITY_ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "required": ["overview", "placements"],
    "properties": {
        "overview": {
            "type": "STRING",
            "description": "A comprehensive security overview of the property. It should detail perimeter security, "
                           "access points, building vulnerabilities (windows, doors), and environmental factors like "
                           "landscaping that could provide concealment. This should be a detailed paragraph.",
        },
        "placements": {
            "type": "ARRAY",
            "description": "A list of recommended camera placements.",
            "items": {
                "type": "OBJECT",
                "required": ["location", "reason", "cameraType", "coordinates"],
                "properties": {
                    "location": {
                        "type": "STRING",
                        "description": "The specific location for the camera, using cardinal directions "
                                       "(e.g., 'Northeast corner of the house', 'West-facing garage door').",
                    },
                    "reason": {
                        "type": "STRING",
                        "description": "The reason for placing a camera here, explaining what it covers and what "
                                       "threats it mitigates based on the image.",
                    },
                    "cameraType": {
                        "type": "STRING",
                        "description": "The recommended type of camera (e.g., 'Doorbell Camera', "
                                       "'4K Bullet Camera with Motorized Zoom', 'Floodlight Cam').",
                    },
                    "coordinates": {
                        "type": "OBJECT",
                        "description": "The (x, y) coordinates on the image for the camera placement, as "
                                       "percentages from the top-left corner.",
                        "required": ["x", "y"],
                        "properties": {
                            "x": {"type": "NUMBER", "description": "Horizontal position as a percentage from the left edge (0-100)."},
                            "y": {"type": "NUMBER", "description": "Vertical position as a percentage from the top edge (0-100)."},
                        },
                    },
                },
            },
        },
        "cameraSummary": {
            "type": "ARRAY",
            "description": "A summary list of the total quantity required for each camera type.",
            "items": {
                "type": "OBJECT",
                "required": ["cameraType", "quantity"],
                "properties": {
                    "cameraType": {"type": "STRING", "description": "The type of camera."},
                    "quantity": {"type": "INTEGER", "description": "The total number of this camera type needed."},
                },
            },
        },
    },
}


def build_security_prompt(address: str) -> str:
    return f"""You are an expert security risk assessor specializing in physical security and CCTV system design. Your task is to perform a detailed security analysis of the property shown in the center of the provided satellite image, located at "{address}". Assume North is at the top of the image. The building structure in the center of the image is the primary focus of the evaluation.

Your analysis must be comprehensive and thorough, with the primary objective of creating a camera layout that **eliminates all potential blind spots**. Your response must be a valid JSON object.

**Core Directives:**

1.  **Detailed Security Overview:**
    *   Focus your assessment exclusively on the central property.
    *   Evaluate perimeter security (fences, gates), access routes (driveways, paths), building vulnerabilities (ground-floor windows, secluded doors), and environmental factors (landscaping, blind spots from architecture). Scrutinize every corner.

2.  **Camera Placement Principles & Recommendations:**
    *   **Goal: No Blind Spots.** Propose as many cameras as necessary to achieve complete coverage of the property's exterior, access points, and vulnerable areas. Prioritize overlapping fields of view at critical points.
    *   **Mounting:** All cameras MUST be placed on existing infrastructure.
        *   **Valid Locations:** Building walls (especially corners for wide views), rooftops, eaves, porch ceilings, existing poles (light poles, utility poles on the property), or other permanent structures.
        *   **Invalid Locations:** DO NOT place cameras floating in the middle of open areas like lawns, fields, or parking lots unless there is a clear structure to mount it on.
    *   For each recommended placement, provide:
        *   A clear location description using cardinal directions (e.g., 'Southeast corner of the main building, under the eave').
        *   A justification explaining the specific vulnerability it covers.
        *   A suggested, specific camera type (e.g., '4K Bullet Camera with Motorized Zoom', 'PTZ Dome Camera', 'License Plate Reader (LPR) Camera', 'Floodlight Camera').
        *   Precise (x, y) percentage coordinates for placing a marker on the image.

3.  **Camera Summary List:**
    *   After the placements, provide a summary list that totals the number of each type of camera required for the installation.

Your final JSON output must conform to the provided schema."""


def split_data_url(image: str) -> Tuple[str, str]:
    """Return (mime_type, base64_data) for a data URL; bare base64 is treated as JPEG."""
    if image.startswith("data:") and "," in image:
        header, data = image.split(",", 1)
        mime_type = header[len("data:"):].split(";")[0] or "image/jpeg"
        return mime_type, data
    return "image/jpeg", image


class VisionAgent:
    """
    Sends the satellite image and address to Gemini and returns the
    schema-constrained camera placement plan.
    """

    def __init__(self, api_key: Optional[str] = None, client=None, model: Optional[str] = None):
        self._api_key = api_key
        self._model = model
        self.gemini_client = client

    @property
    def gemini_api_key(self) -> Optional[str]:
        return self._api_key or get_gemini_api_key()

    @property
    def model(self) -> str:
        return self._model or get_gemini_model()

    def _get_client(self):
        if self.gemini_client is None:
            self.gemini_client = genai.Client(api_key=self.gemini_api_key)
            logger.info("Gemini Vision client initialized (google-genai).")
        return self.gemini_client

    async def analyze_security_image(self, address: str, image: str) -> SecurityAnalysis:
        """
        Run the multimodal security assessment.

        Any model, transport or parsing failure is reported as a single
        ANALYSIS_FAILED error; nothing is retried.
        """
        if not self.gemini_api_key:
            raise SurveyError(
                ErrorKind.MISSING_CONFIGURATION,
                "Gemini API Key is not configured. Please ensure GEMINI_API_KEY is set in your environment variables.",
            )

        try:
            mime_type, data = split_data_url(image)
            image_part = types.Part.from_bytes(data=base64.b64decode(data), mime_type=mime_type)

            logger.info(f"Requesting security analysis from {self.model} for '{address}'")
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=[build_security_prompt(address), image_part],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=SECURITY_ANALYSIS_SCHEMA,
                ),
            )
            analysis = SecurityAnalysis.model_validate(json.loads(response.text.strip()))
        except Exception as e:
            logger.error(f"Error getting security analysis: {e}")
            raise SurveyError(ErrorKind.ANALYSIS_FAILED, ANALYSIS_FAILED_MESSAGE) from e

        logger.info(f"Security analysis returned {len(analysis.placements)} placements")
        return analysis


_agent: Optional[VisionAgent] = None


def get_vision_agent() -> VisionAgent:
    global _agent
    if _agent is None:
        _agent = VisionAgent()
    return _agent


async def get_security_analysis(address: str, image: str) -> SecurityAnalysis:
    return await get_vision_agent().analyze_security_image(address, image)
