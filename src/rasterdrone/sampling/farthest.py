"""
Farthest-point sampling.

Greedy covering: every new pick is the candidate farthest from everything
picked so far, which spreads the selection evenly over the input's extent.
"""

import numpy as np

from rasterdrone.models import array_to_coordinates, coordinates_to_array
from rasterdrone.tracer import get_tracer, trace


@trace(label="farthest_point_sampling")
def farthest_point_sampling(coords, count):
    """
    Reduce a coordinate sequence to `count` well-spread points.

    The first pick is the last input point, so results are reproducible.
    Each later pick maximizes its squared distance to the nearest already
    chosen point; ties go to the lowest input index.

    Returns a new list. Inputs with at most `count` points come back as a
    copy in their original order.
    """
    tracer = get_tracer()

    count = max(int(count), 0)
    total = len(coords)
    if total <= count:
        return list(coords)
    if count == 0:
        return []

    source = coordinates_to_array(coords)
    points = source.astype(np.float64)
    min_dist = np.full(total, np.inf)
    selected = np.empty(count, dtype=np.int64)

    current = total - 1
    for i in range(count):
        selected[i] = current
        # Chosen points drop below any real distance so they are never re-picked
        min_dist[current] = -1.0
        delta = points - points[current]
        dist = np.einsum("ij,ij->i", delta, delta)
        np.minimum(min_dist, dist, out=min_dist, where=min_dist >= 0)
        current = int(np.argmax(min_dist))

    tracer.event("Farthest-point sampling done", input=total, output=count)
    return array_to_coordinates(source[selected])
