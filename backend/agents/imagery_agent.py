import base64
import logging
from typing import Optional

import httpx

from backend.models.security_analysis import Coordinate
from backend.utils.config import (
    get_maps_api_key, MIN_ZOOM, MAX_ZOOM,
    DEFAULT_IMAGE_WIDTH, DEFAULT_IMAGE_HEIGHT,
)
from backend.utils.errors import ErrorKind, SurveyError

logger = logging.getLogger(__name__)
# httpx logs full request URLs at INFO, and the Maps key travels as a query parameter
logging.getLogger("httpx").setLevel(logging.WARNING)

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"

REQUEST_DENIED_MESSAGE = (
    "The request to Google Maps was denied. This is often due to an issue with the API key. "
    "Please ensure the key is correct and that both the 'Geocoding API' and 'Maps Static API' "
    "are enabled in your Google Cloud project dashboard."
)

GEOCODE_STATUS_ERRORS = {
    "ZERO_RESULTS": (
        ErrorKind.ZERO_RESULTS,
        "No location could be found for the address entered. Please check for typos and try again.",
    ),
    "OVER_QUERY_LIMIT": (
        ErrorKind.OVER_QUERY_LIMIT,
        "The application has exceeded its daily usage limit for the Google Maps API. Please try again later.",
    ),
    "INVALID_REQUEST": (
        ErrorKind.INVALID_REQUEST,
        "The request to Google Maps was invalid, which might indicate a problem with the address format.",
    ),
}


def clamp_zoom(zoom: int) -> int:
    return max(MIN_ZOOM, min(MAX_ZOOM, int(zoom)))


def to_data_url(content: bytes, mime_type: str = "image/jpeg") -> str:
    """Encode raw image bytes as an embeddable data URL."""
    encoded = base64.b64encode(content).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


class ImageryAgent:
    """
    Resolves an address with the Google Geocoding API and fetches a satellite
    tile for it from the Maps Static API.

    Every call geocodes from scratch; nothing is cached between zoom levels.
    """

    def __init__(self, api_key: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = api_key
        # Injected in tests (httpx.MockTransport)
        self._transport = transport

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key or get_maps_api_key()

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=None, transport=self._transport)

    async def geocode(self, address: str, client: httpx.AsyncClient) -> Coordinate:
        try:
            response = await client.get(GEOCODE_URL, params={"address": address, "key": self.api_key})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Network error during geocoding: {type(e).__name__}")
            raise SurveyError(
                ErrorKind.NETWORK,
                "A network error occurred while trying to contact Google Maps. Please check your connection.",
            ) from e

        status = data.get("status")
        if status != "OK":
            logger.warning(f"Geocoding failed status: {status}. Msg: {data.get('error_message', 'No message')}")
            if status == "REQUEST_DENIED":
                message = REQUEST_DENIED_MESSAGE
                if data.get("error_message"):
                    message += f" (Google's message: {data['error_message']})"
                raise SurveyError(ErrorKind.REQUEST_DENIED, message)
            kind, message = GEOCODE_STATUS_ERRORS.get(
                status,
                (ErrorKind.UNKNOWN_STATUS, f"Could not find location. Google Maps status: {status}."),
            )
            raise SurveyError(kind, message)

        results = data.get("results") or []
        if not results:
            raise SurveyError(
                ErrorKind.GEOCODE_EMPTY,
                "Google Maps returned a success status but no location data. Please try a different address.",
            )

        location = results[0]["geometry"]["location"]
        coord = Coordinate(lat=float(location["lat"]), lng=float(location["lng"]))
        logger.info(f"Geocoded '{address}' -> ({coord.lat}, {coord.lng})")
        return coord

    def static_map_params(self, coord: Coordinate, zoom: int, width: Optional[int] = None,
                          height: Optional[int] = None) -> dict:
        width = width or DEFAULT_IMAGE_WIDTH
        height = height or DEFAULT_IMAGE_HEIGHT
        return {
            "center": f"{coord.lat},{coord.lng}",
            "zoom": clamp_zoom(zoom),
            "size": f"{width}x{height}",
            "maptype": "satellite",
            "key": self.api_key,
        }

    async def fetch_aerial_image(self, address: str, zoom: int, width: Optional[int] = None,
                                 height: Optional[int] = None) -> str:
        """
        Geocode `address` and return the satellite image centred on it as a
        base64 data URL.

        Raises:
            SurveyError: tagged with the geocode status, a network failure,
                or IMAGERY_FETCH_FAILED when the static map cannot be fetched.
        """
        if not self.api_key:
            raise SurveyError(
                ErrorKind.MISSING_CONFIGURATION,
                "Google Maps API Key is not configured. Please ensure MAPS_API_KEY is set in your environment variables.",
            )

        async with self._client() as client:
            coord = await self.geocode(address, client)
            params = self.static_map_params(coord, zoom, width, height)
            try:
                response = await client.get(STATIC_MAP_URL, params=params)
                response.raise_for_status()
            except httpx.HTTPError as e:
                status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else type(e).__name__
                logger.error(f"Error fetching map image: {status_code}")
                raise SurveyError(
                    ErrorKind.IMAGERY_FETCH_FAILED,
                    "Failed to retrieve satellite imagery from Google Maps. This can happen if the "
                    "'Maps Static API' is not enabled for your API key, even if geocoding works.",
                ) from e

        mime_type = response.headers.get("content-type", "image/jpeg").split(";")[0].strip() or "image/jpeg"
        logger.info(f"Fetched satellite image at zoom {params['zoom']} ({len(response.content)} bytes, {mime_type})")
        return to_data_url(response.content, mime_type)


_agent: Optional[ImageryAgent] = None


def get_imagery_agent() -> ImageryAgent:
    global _agent
    if _agent is None:
        _agent = ImageryAgent()
    return _agent


async def get_aerial_view_from_address(address: str, zoom: int, width: Optional[int] = None,
                                       height: Optional[int] = None) -> str:
    return await get_imagery_agent().fetch_aerial_image(address, zoom, width, height)
