"""
Rasterization and viewport placement of sampled coordinates.

Used for preview images and by renderers that draw one light per
coordinate inside an on-screen viewport.
"""

import numpy as np

from rasterdrone.models import coordinates_to_array


def coordinates_to_image(width, height, coords):
    """
    Paint coordinates as white pixels on a black grayscale canvas.

    Coordinates outside the canvas are skipped.
    """
    canvas = np.zeros((height, width), dtype=np.uint8)
    points = coordinates_to_array(coords)
    if points.size == 0:
        return canvas

    xs, ys = points[:, 0], points[:, 1]
    inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
    canvas[ys[inside], xs[inside]] = 255
    return canvas


def map_to_viewport(coords, image_size, viewport, scale_factor=1.0):
    """
    Map image-space coordinates into a viewport rectangle.

    Args:
        coords: sequence of Coordinate in image pixels
        image_size: (width, height) of the image the coordinates came from
        viewport: (min_x, min_y, width, height) in logical units
        scale_factor: logical-to-physical pixel ratio of the display

    Returns:
        float32 array (n, 2) of physical viewport positions.
    """
    img_w, img_h = image_size
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"Image size must be positive, got {image_size}")

    min_x, min_y, view_w, view_h = (float(v) * scale_factor for v in viewport)
    points = coordinates_to_array(coords).astype(np.float32)
    if points.size == 0:
        return np.empty((0, 2), dtype=np.float32)

    mapped = np.empty_like(points)
    mapped[:, 0] = points[:, 0] / img_w * view_w + min_x
    mapped[:, 1] = points[:, 1] / img_h * view_h + min_y
    return mapped
