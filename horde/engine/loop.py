"""Fixed timestep spawn loop."""
from __future__ import annotations

import time
from typing import Callable, Optional


class FixedTimestepLoop:
    """Runs a deterministic fixed update loop, in real time or headless."""

    def __init__(
        self,
        update: Callable[[float], None],
        on_frame: Optional[Callable[[float], None]] = None,
        fixed_hz: float = 60.0,
        max_frame_time: float = 0.25,
    ) -> None:
        self.update = update
        self.on_frame = on_frame
        self.fixed_dt = 1.0 / fixed_hz
        self.max_frame_time = max_frame_time
        self._accumulator = 0.0
        self._running = False

    def stop(self) -> None:
        self._running = False

    def advance(self, frame_time: float) -> int:
        """Consume ``frame_time`` seconds and return the number of updates run."""

        if frame_time > self.max_frame_time:
            frame_time = self.max_frame_time
        self._accumulator += max(0.0, frame_time)
        steps = 0
        while self._accumulator >= self.fixed_dt:
            self.update(self.fixed_dt)
            self._accumulator -= self.fixed_dt
            steps += 1
        if self.on_frame is not None:
            alpha = self._accumulator / self.fixed_dt if self.fixed_dt > 0 else 0.0
            self.on_frame(alpha)
        return steps

    def run_for(self, seconds: float) -> int:
        """Step the loop headless for ``seconds`` of simulation time."""

        self._running = True
        steps = 0
        remaining = seconds
        while self._running and remaining > 1e-9:
            frame_time = min(self.max_frame_time, remaining)
            steps += self.advance(frame_time)
            remaining -= frame_time
        self._running = False
        return steps

    def run(self) -> None:
        self._running = True
        last_time = time.perf_counter()
        while self._running:
            now = time.perf_counter()
            frame_time = now - last_time
            last_time = now
            self.advance(frame_time)
            time.sleep(max(0.0, self.fixed_dt - (time.perf_counter() - now)))


__all__ = ["FixedTimestepLoop"]
