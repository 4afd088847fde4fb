"""
Memoization of a single pipeline stage.

A StageCache remembers the parameters its output was computed from and
recomputes only when it is asked for different parameters.
"""

from typing import Callable, Generic, Optional, TypeVar

P = TypeVar("P")
O = TypeVar("O")

_UNSET = object()


class StageCache(Generic[P, O]):
    """Applied-parameters / cached-output pair for one stage."""

    def __init__(self, name):
        self.name = name
        self._applied = _UNSET
        self._output = None
        self.compute_count = 0

    @property
    def has_value(self):
        return self._applied is not _UNSET

    @property
    def applied_params(self) -> Optional[P]:
        return None if self._applied is _UNSET else self._applied

    @property
    def output(self) -> Optional[O]:
        return self._output

    def is_stale(self, params: P) -> bool:
        """True when the cached output was not produced from `params`."""
        return self._applied is _UNSET or self._applied != params

    def refresh(self, params: P, compute: Callable[[P], O]) -> O:
        """
        Recompute and store the output for `params`.

        If compute raises, the previous params and output stay in place.
        """
        output = compute(params)
        self._applied = params
        self._output = output
        self.compute_count += 1
        return output

    def get(self, params: P, compute: Callable[[P], O]) -> O:
        """Return the cached output, recomputing first if stale."""
        if self.is_stale(params):
            return self.refresh(params, compute)
        return self._output

    def invalidate(self):
        """Forget the applied params so the next request recomputes."""
        self._applied = _UNSET
