"""Per-session state: cumulative baselines and derived series."""

from __future__ import annotations


class Session:
    """Holds the derived series and counter baselines for one sampling run.

    Only the collection loop writes to a session while sampling is active.
    Readers must wait until the sampler has been stopped.
    """

    def __init__(self) -> None:
        self._series: dict[str, list[float]] = {}
        self._cumulative: dict[str, float] = {}

    def record_delta(self, name: str, value: float) -> None:
        """Append *value* to the series for *name*."""
        self._series.setdefault(name, []).append(value)

    def update_cumulative(self, name: str, value: float) -> None:
        """Store *value* as the latest cumulative reading for *name*."""
        self._cumulative[name] = value

    def previous(self, name: str) -> float:
        """Return the last cumulative reading for *name*, or 0.0 if none."""
        return self._cumulative.get(name, 0.0)

    def series(self, name: str) -> list[float]:
        """Return a copy of the recorded series for *name*."""
        return list(self._series.get(name, []))

    def names(self) -> list[str]:
        return list(self._series)
