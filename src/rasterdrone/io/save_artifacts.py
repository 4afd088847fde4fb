"""
Artifact saving utilities for rasterdrone.

Writes coordinate tables, run summaries and preview images.
"""

import csv
import json
import os

import cv2
import numpy as np

from rasterdrone.tracer import get_tracer


def ensure_dir(path):
    """Create directory if it does not exist."""
    if path:
        os.makedirs(path, exist_ok=True)


def save_image(img, path):
    """
    Save an image array to disk.

    RGB and RGBA arrays are converted to OpenCV's BGR(A) order first.
    """
    tracer = get_tracer()

    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)
    elif img.ndim == 3 and img.shape[2] == 4:
        img = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)

    ensure_dir(os.path.dirname(path))
    if not cv2.imwrite(path, img):
        raise ValueError(f"Failed to write image: {path}")
    tracer.event(f"Saved image: {path}")


def save_json(data, path, indent=2):
    """Save a dictionary or pydantic model to JSON."""
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))

    if hasattr(data, "model_dump"):
        data = data.model_dump(mode="json")

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, default=str)

    tracer.event(f"Saved JSON: {path}")


def save_coordinates_csv(points, path, header=("x", "y"), precision=None):
    """
    Save (x, y) rows to CSV.

    Integer pixel coordinates are written as-is; float positions are
    rounded to `precision` decimals when given.
    """
    tracer = get_tracer()

    ensure_dir(os.path.dirname(path))
    rows = np.asarray(points).reshape(-1, 2).tolist()

    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for x, y in rows:
            if precision is not None:
                x, y = round(x, precision), round(y, precision)
            writer.writerow([x, y])

    tracer.event(f"Saved CSV: {path}", rows=len(rows))
