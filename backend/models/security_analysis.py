from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class Coordinate(BaseModel):
    """Geographic coordinate returned by geocoding."""
    lat: float
    lng: float


class MarkerPosition(BaseModel):
    """Marker position as percentages from the image's top-left corner."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(..., description="Horizontal position, 0-100 from the left edge")
    y: float = Field(..., description="Vertical position, 0-100 from the top edge")


class CameraPlacement(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    location: str
    reason: str
    camera_type: str = Field(..., alias="cameraType")
    coordinates: MarkerPosition


class CameraSummaryItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    camera_type: str = Field(..., alias="cameraType")
    quantity: int


class SecurityAnalysis(BaseModel):
    """
    Structured recommendation returned by the vision model.

    Wire names are camelCase (cameraType, cameraSummary); dump with
    by_alias=True to reproduce the schema-shaped JSON.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    overview: str
    placements: List[CameraPlacement]
    camera_summary: Optional[List[CameraSummaryItem]] = Field(None, alias="cameraSummary")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
