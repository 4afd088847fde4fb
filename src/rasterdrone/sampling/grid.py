"""Grid (spatial hash) sampling: at most one point per square cell."""

from rasterdrone.models import Coordinate, InvalidParameterError
from rasterdrone.tracer import get_tracer, trace


def validate_cell_size(cell_size):
    """Return cell_size as an int, raising InvalidParameterError unless positive."""
    if cell_size is None or int(cell_size) <= 0:
        raise InvalidParameterError(f"Grid cell size must be positive, got {cell_size}")
    return int(cell_size)


def cell_key(coord, cell_size):
    """Return the (column, row) grid cell a coordinate falls in."""
    return (coord[0] // cell_size, coord[1] // cell_size)


@trace(label="grid_sampling")
def grid_sampling(coords, cell_size):
    """
    Keep the first point that lands in each cell of a square grid.

    Output order follows input order. The number of points returned is the
    number of occupied cells, independent of any target count.

    Raises InvalidParameterError when cell_size is not positive.
    """
    tracer = get_tracer()
    cell_size = validate_cell_size(cell_size)

    occupied = set()
    sampled = []
    for coord in coords:
        key = cell_key(coord, cell_size)
        if key in occupied:
            continue
        occupied.add(key)
        sampled.append(Coordinate(coord[0], coord[1]))

    tracer.event("Grid sampling done", input=len(coords), output=len(sampled), cell_size=cell_size)
    return sampled
