"""U-space (airspace context) and geoawareness session contracts."""

from pydantic import BaseModel, ConfigDict, Field


class BoundaryPoint(BaseModel):
    """WGS84 vertex of a U-space boundary."""

    latitude: float
    longitude: float

    model_config = ConfigDict(frozen=True)


class USpace(BaseModel):
    """An airspace region against which geoawareness is evaluated."""

    id: str = Field(..., min_length=1)
    name: str
    boundary: list[BoundaryPoint] = Field(default_factory=list)

    def center(self) -> tuple[float, float] | None:
        """Mean (latitude, longitude) of the boundary, None when empty."""
        if not self.boundary:
            return None
        lat = sum(p.latitude for p in self.boundary) / len(self.boundary)
        lon = sum(p.longitude for p in self.boundary) / len(self.boundary)
        return lat, lon


class GeoawarenessSession(BaseModel):
    """Hand-off to the live geoawareness view.

    The live channel itself (a websocket keyed by the U-space) is opened by
    the presentation layer.
    """

    plan_id: str
    airspace_context: str
    live_channel_ref: str
