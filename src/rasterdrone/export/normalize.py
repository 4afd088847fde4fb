"""
Normalization of sampled coordinates into physical layout units.

Pixel coordinates grow downward from the top-left corner; layouts are
expressed with y growing upward, scaled so the longer axis spans
`physical_size` units.
"""

import numpy as np

from rasterdrone.models import DegenerateCoordinatesError, coordinates_to_array
from rasterdrone.tracer import trace


def unit_square(coords):
    """
    Fit coordinates into the unit square, preserving aspect ratio.

    The longer axis spans exactly [0, 1]; y is flipped so the topmost pixel
    row maps to the largest value.

    Returns a float64 array (n, 2). Raises DegenerateCoordinatesError when
    the points have no extent (a single point, or all identical).
    """
    points = coordinates_to_array(coords).astype(np.float64)
    if points.size == 0:
        return np.empty((0, 2), dtype=np.float64)

    mins = points.min(axis=0)
    maxs = points.max(axis=0)
    extent = float((maxs - mins).max())
    if extent == 0.0:
        raise DegenerateCoordinatesError(
            f"Cannot normalize {len(points)} coordinate(s) with zero extent"
        )

    scale = 1.0 / extent
    normalized = np.empty_like(points)
    normalized[:, 0] = (points[:, 0] - mins[0]) * scale
    normalized[:, 1] = (maxs[1] - points[:, 1]) * scale
    return normalized


@trace(label="normalize_coordinates")
def normalize_coordinates(coords, physical_size=1.0):
    """
    Convert pixel coordinates to physical layout positions.

    Args:
        coords: sequence of Coordinate
        physical_size: length in target units of the longer axis

    Returns:
        float64 array (n, 2) of (x, y) positions.
    """
    if physical_size <= 0:
        raise ValueError(f"Physical size must be positive, got {physical_size}")
    return unit_square(coords) * float(physical_size)
