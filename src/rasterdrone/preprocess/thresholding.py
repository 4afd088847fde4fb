"""
Bradley adaptive thresholding.

Each pixel is compared against the mean of a square window around it, read
in O(1) from a summed-area table, so uneven illumination does not wash out
the binarization the way a single global cutoff would.
"""

import numpy as np

from rasterdrone.models import InvalidParameterError
from rasterdrone.tracer import get_tracer, trace


def integral_image(gray):
    """
    Build the summed-area table of a 2-D image.

    I[y, x] is the sum of all pixels in the rectangle (0, 0)-(x, y)
    inclusive, so I[-1, -1] equals the sum of the whole image.
    """
    gray = np.asarray(gray)
    if gray.ndim != 2:
        raise ValueError(f"Expected a 2-D grayscale image, got shape {gray.shape}")
    return gray.astype(np.int64).cumsum(axis=0).cumsum(axis=1)


def _window_bounds(length, half):
    idx = np.arange(length)
    lo = np.maximum(idx - half, 0)
    hi = np.minimum(idx + half, length - 1)
    return lo, hi


@trace(label="bradley_threshold")
def bradley_threshold(gray, window_size, threshold_percent):
    """
    Binarize a grayscale image with Bradley's adaptive method.

    Args:
        gray: 2-D uint8 array (H, W)
        window_size: side of the local window in pixels, must be > 0
        threshold_percent: how far below the local mean (0-100) a pixel must
            be to turn black

    Returns:
        uint8 array of the same shape holding only 0 and 255.

    Raises InvalidParameterError for a non-positive window or a percent
    outside 0-100.
    """
    tracer = get_tracer()

    if window_size is None or int(window_size) <= 0:
        raise InvalidParameterError(f"Adaptive window size must be positive, got {window_size}")
    if not 0 <= int(threshold_percent) <= 100:
        raise InvalidParameterError(
            f"Adaptive threshold percent must be within 0-100, got {threshold_percent}"
        )

    gray = np.asarray(gray)
    height, width = gray.shape[:2]
    if height == 0 or width == 0:
        return np.zeros((height, width), dtype=np.uint8)

    with tracer.span("integral", module="thresholding"):
        integral = integral_image(gray)
        # One leading zero row and column so x1-1 / y1-1 lookups need no branches
        padded = np.zeros((height + 1, width + 1), dtype=np.int64)
        padded[1:, 1:] = integral

    half = int(window_size) // 2
    x1, x2 = _window_bounds(width, half)
    y1, y2 = _window_bounds(height, half)

    with tracer.span("classify", module="thresholding"):
        window_sum = (
            padded[np.ix_(y2 + 1, x2 + 1)]
            - padded[np.ix_(y1, x2 + 1)]
            - padded[np.ix_(y2 + 1, x1)]
            + padded[np.ix_(y1, x1)]
        )
        count = np.outer(y2 - y1 + 1, x2 - x1 + 1)

        cutoff = (window_sum * (100 - int(threshold_percent))) // 100
        black = gray.astype(np.int64) * count <= cutoff
        binary = np.where(black, 0, 255).astype(np.uint8)

    tracer.event(
        "Adaptive threshold applied",
        window=int(window_size),
        percent=int(threshold_percent),
        black_ratio=round(float(black.mean()), 4),
    )

    return binary
