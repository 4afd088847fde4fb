"""
Image loading utilities for rasterdrone.

Decodes image files into RGBA arrays in row-major order, the layout every
preprocessing step expects.
"""

import os

import cv2
import numpy as np

from rasterdrone.tracer import get_tracer, trace

SUPPORTED_EXTENSIONS = [".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff"]


@trace(label="load_image")
def load_image(path):
    """
    Load an image from disk.

    Returns a tuple of (image, metadata) where:
    - image: RGBA numpy array (H, W, 4), uint8
    - metadata: dict with width, height, channels, source_path

    Raises FileNotFoundError if path does not exist.
    Raises ValueError if the file cannot be decoded.
    """
    tracer = get_tracer()
    path = os.fspath(path)

    if not os.path.exists(path):
        raise FileNotFoundError(f"Image not found: {path}")

    # Keep alpha when present; OpenCV returns BGR(A)
    raw = cv2.imread(path, cv2.IMREAD_UNCHANGED)
    if raw is None:
        raise ValueError(f"Failed to load image: {path}")

    rgba = _to_rgba(raw)
    height, width = rgba.shape[:2]
    channels = 1 if raw.ndim == 2 else raw.shape[2]

    tracer.event(f"Loaded image: {width}x{height}, channels={channels}")

    metadata = {
        "width": width,
        "height": height,
        "channels": channels,
        "source_path": os.path.abspath(path),
    }
    return rgba, metadata


def _to_rgba(raw):
    """Convert an OpenCV-decoded array (gray, BGR or BGRA) to 8-bit RGBA."""
    if raw.dtype == np.uint16:
        raw = (raw >> 8).astype(np.uint8)
    elif raw.dtype != np.uint8:
        raw = cv2.normalize(raw, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if raw.ndim == 2:
        return cv2.cvtColor(raw, cv2.COLOR_GRAY2RGBA)
    if raw.shape[2] == 3:
        return cv2.cvtColor(raw, cv2.COLOR_BGR2RGBA)
    return cv2.cvtColor(raw, cv2.COLOR_BGRA2RGBA)


def validate_image_input(path):
    """
    Check that a path exists and has a supported image extension.

    Returns a list of error messages (empty if valid).
    """
    errors = []
    path = os.fspath(path)

    if not os.path.exists(path):
        errors.append(f"File not found: {path}")
        return errors

    ext = os.path.splitext(path)[1].lower()
    if ext not in SUPPORTED_EXTENSIONS:
        errors.append(f"Unsupported image format: {path}")

    return errors
