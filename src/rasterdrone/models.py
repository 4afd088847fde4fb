"""
Data models for the rasterdrone coordinate pipeline.

Coordinates are plain value tuples so they stay cheap on the sampling hot
path; the intermediate coordinate set is a validated pydantic model.
"""

from enum import Enum
from typing import NamedTuple, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator


class RasterDroneError(Exception):
    """Base exception for rasterdrone."""


class InvalidParameterError(RasterDroneError, ValueError):
    """A stage was configured with a structurally invalid parameter."""


class DegenerateCoordinatesError(RasterDroneError, ValueError):
    """A coordinate set has no spatial extent to normalize against."""


class ImagePolarity(str, Enum):
    """Which side of the brightness scale holds the subject."""
    BLACK_ON_WHITE = "black_on_white"
    WHITE_ON_BLACK = "white_on_black"


class SamplingStrategy(str, Enum):
    """Point reduction algorithms."""
    FARTHEST = "farthest"
    GRID = "grid"


class Coordinate(NamedTuple):
    """A pixel position (x, y) in image space."""
    x: int
    y: int

    def distance_squared(self, other):
        dx = self.x - other.x
        dy = self.y - other.y
        return float(dx * dx + dy * dy)


class CoordinateOutput(BaseModel):
    """Full-resolution coordinate set paired with its source image size."""
    coordinates: Tuple[Coordinate, ...] = Field(default_factory=tuple)
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_bounds(self):
        for coord in self.coordinates:
            if coord.x < 0 or coord.y < 0 or coord.x >= self.width or coord.y >= self.height:
                raise ValueError(
                    f"Coordinate {tuple(coord)} outside image bounds {self.width}x{self.height}"
                )
        return self

    def __len__(self):
        return len(self.coordinates)

    def coords(self):
        """Return a fresh list of the coordinates."""
        return list(self.coordinates)

    def as_array(self):
        """Return coordinates as an (n, 2) int64 array of (x, y)."""
        if not self.coordinates:
            return np.empty((0, 2), dtype=np.int64)
        return np.asarray(self.coordinates, dtype=np.int64)


def coordinates_to_array(coords):
    """Convert a coordinate sequence to an (n, 2) int64 array."""
    if len(coords) == 0:
        return np.empty((0, 2), dtype=np.int64)
    return np.asarray([(c[0], c[1]) for c in coords], dtype=np.int64)


def array_to_coordinates(arr):
    """Convert an (n, 2) array back to a list of Coordinate."""
    return [Coordinate(x, y) for x, y in np.asarray(arr).tolist()]
