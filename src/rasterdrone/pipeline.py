"""
Stage functions for the rasterdrone pipeline.

Preprocessing (threshold, resize, extract) is the expensive stage and
produces the full-resolution CoordinateOutput; sampling reduces that set to
the final light positions. Both are pure functions of their arguments so
the orchestrator can cache them by parameter equality.
"""

import os

from rasterdrone.config import FarthestPointParams, GridParams, load_config
from rasterdrone.io.load_image import load_image
from rasterdrone.models import CoordinateOutput
from rasterdrone.preprocess.extraction import (
    image_to_coordinates,
    resize_to_fit,
    to_grayscale,
    to_rgba,
)
from rasterdrone.preprocess.thresholding import bradley_threshold
from rasterdrone.sampling.farthest import farthest_point_sampling
from rasterdrone.sampling.grid import grid_sampling, validate_cell_size
from rasterdrone.tracer import get_tracer, trace


@trace(label="preprocessing_stage")
def run_preprocessing_stage(params, image):
    """
    Turn a loaded image into the full coordinate set.

    Args:
        params: PreprocessingParams
        image: RGBA array, or None when no image is loaded

    Returns:
        CoordinateOutput sized to the (possibly resized) image, or None when
        there is no image.
    """
    tracer = get_tracer()

    if image is None:
        tracer.event("No image loaded, skipping preprocessing")
        return None

    rgba = to_rgba(image)

    if params.use_adaptive:
        gray = to_grayscale(rgba)
        binary = bradley_threshold(gray, params.adaptive_window, params.adaptive_threshold)
        rgba = to_rgba(binary)

    if params.resize is not None:
        rgba = resize_to_fit(rgba, params.resize)

    height, width = rgba.shape[:2]
    coords = image_to_coordinates(rgba, params.percentile, params.polarity)

    return CoordinateOutput(coordinates=tuple(coords), width=width, height=height)


def sample(coords, params):
    """
    Apply the sampler selected by `params` to a coordinate sequence.

    Inputs of at most `params.count` points come back as an unsampled copy
    in their original order, whichever algorithm is selected. Invalid grid
    cell sizes are rejected even then.
    """
    if isinstance(params, GridParams):
        validate_cell_size(params.cell_size)
    elif not isinstance(params, FarthestPointParams):
        raise TypeError(f"Unknown sampling parameters: {type(params).__name__}")

    if len(coords) <= params.count:
        return list(coords)

    if isinstance(params, GridParams):
        return grid_sampling(coords, params.cell_size)
    return farthest_point_sampling(coords, params.count)


@trace(label="sampling_stage")
def run_sampling_stage(params, intermediate):
    """
    Reduce the intermediate coordinate set to the final light positions.

    Returns an empty list when there is no intermediate output.
    """
    if intermediate is None:
        return []
    return sample(intermediate.coords(), params)


@trace(label="process_image")
def process_image(source, config=None, config_path=None):
    """
    Run both stages once on an image file or array.

    Returns a tuple of (CoordinateOutput or None, list of sampled Coordinate).
    """
    if config is None:
        config = load_config(config_path)

    if isinstance(source, (str, os.PathLike)):
        image, _ = load_image(source)
    else:
        image = source

    intermediate = run_preprocessing_stage(config.preprocessing.to_params(), image)
    final = run_sampling_stage(config.sampling.to_params(), intermediate)
    return intermediate, final
