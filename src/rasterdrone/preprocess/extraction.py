"""
Coordinate extraction from RGBA images.

Ranks pixels by perceptual brightness and keeps the brightest fraction as
pixel coordinates. Also holds the small image helpers the preprocessing
stage chains around the extractor (RGBA normalization, grayscale, resize).
"""

import math

import cv2
import numpy as np

from rasterdrone.models import Coordinate, ImagePolarity
from rasterdrone.tracer import get_tracer, trace

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def to_rgba(image):
    """
    Normalize an image array to (H, W, 4) uint8 RGBA.

    Accepts grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) input.
    """
    image = np.asarray(image)
    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if image.ndim == 3 and image.shape[2] == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2RGBA)
    if image.ndim == 3 and image.shape[2] == 4:
        return image
    raise ValueError(f"Unsupported image shape: {image.shape}")


def to_grayscale(rgba):
    """Convert an RGBA array to single-channel uint8 luminance."""
    return cv2.cvtColor(to_rgba(rgba), cv2.COLOR_RGBA2GRAY)


def resize_to_fit(rgba, bounds):
    """
    Shrink an image to fit within (max_width, max_height).

    Aspect ratio is preserved and images already inside the bounds are
    returned unchanged; this never upscales.
    """
    max_w, max_h = bounds
    height, width = rgba.shape[:2]
    if max_w <= 0 or max_h <= 0:
        raise ValueError(f"Resize bounds must be positive, got {bounds}")
    if width <= max_w and height <= max_h:
        return rgba

    scale = min(max_w / width, max_h / height)
    new_size = (max(1, int(round(width * scale))), max(1, int(round(height * scale))))
    return cv2.resize(rgba, new_size, interpolation=cv2.INTER_AREA)


def pixel_brightness(rgba, polarity):
    """
    Per-pixel brightness used to rank candidate coordinates.

    Luminance 0.299R + 0.587G + 0.114B is weighted by alpha/255 so
    transparent regions never qualify. For black-on-white images the
    luminance is inverted first, making the dark subject the "bright" part.
    """
    rgba = to_rgba(rgba)
    rgb = rgba[..., :3].astype(np.float64)
    alpha = rgba[..., 3].astype(np.float64) / 255.0

    # Invert channels before weighting so pure white lands on exactly 0
    if ImagePolarity(polarity) == ImagePolarity.BLACK_ON_WHITE:
        rgb = 255.0 - rgb

    return (rgb @ LUMA_WEIGHTS) * alpha


def _round_half_up(value):
    return int(math.floor(value + 0.5))


@trace(label="image_to_coordinates")
def image_to_coordinates(rgba, percentile, polarity):
    """
    Select the brightest fraction of an image's pixels.

    Args:
        rgba: image array (any shape accepted by to_rgba)
        percentile: fraction in [0, 1] of non-zero pixels to keep; values
            outside the range are clamped
        polarity: which side of the brightness scale is the subject

    Returns:
        list of Coordinate ordered brightest first. Equal brightness keeps
        row-major scan order.
    """
    tracer = get_tracer()

    percentile = min(max(float(percentile), 0.0), 1.0)
    brightness = pixel_brightness(rgba, polarity)
    width = brightness.shape[1]
    brightness = brightness.ravel()

    candidates = np.flatnonzero(brightness > 0)
    if candidates.size == 0 or percentile == 0.0:
        tracer.event("No coordinates selected", candidates=int(candidates.size), percentile=percentile)
        return []

    # Stable sort on negated brightness keeps scan order among ties
    order = np.argsort(-brightness[candidates], kind="stable")
    take = _round_half_up(candidates.size * percentile)
    chosen = candidates[order[:take]]

    ys, xs = np.divmod(chosen, width)
    coords = [Coordinate(x, y) for x, y in zip(xs.tolist(), ys.tolist())]

    tracer.event("Extracted coordinates", candidates=int(candidates.size), selected=len(coords))
    return coords
