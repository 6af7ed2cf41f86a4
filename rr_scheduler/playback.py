from __future__ import annotations

from typing import Optional

from .models import GanttChartItem, SimulationResult, SimulationStep


class StepCursor:
    """
    Read-only cursor over a precomputed step trace.

    Moving the cursor never re-runs the simulation; it only changes which
    recorded step is current.
    """

    def __init__(self, result: SimulationResult) -> None:
        self._result = result
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._result.steps)

    @property
    def current(self) -> Optional[SimulationStep]:
        if not self._result.steps:
            return None
        return self._result.steps[self._index]

    @property
    def time(self) -> Optional[int]:
        step = self.current
        return None if step is None else step.time

    @property
    def at_end(self) -> bool:
        return self._index >= len(self) - 1

    def step_forward(self) -> Optional[SimulationStep]:
        if not self.at_end:
            self._index += 1
        return self.current

    def step_backward(self) -> Optional[SimulationStep]:
        if self._index > 0:
            self._index -= 1
        return self.current

    def reset(self) -> Optional[SimulationStep]:
        self._index = 0
        return self.current

    def seek(self, index: int) -> SimulationStep:
        if not 0 <= index < len(self):
            raise IndexError(f"step index {index} out of range (0..{len(self) - 1})")
        self._index = index
        return self._result.steps[index]

    def active_item(self) -> Optional[GanttChartItem]:
        time = self.time
        if time is None:
            return None
        for item in self._result.gantt_chart:
            if item.covers(time):
                return item
        return None

    @staticmethod
    def interval(speed: float) -> float:
        """Seconds between steps when playing at ``speed`` steps per second."""
        if speed <= 0:
            raise ValueError(f"playback speed must be positive, got {speed!r}")
        return 1.0 / speed
