"""
Result Sinks

A sink is any callable accepting a ``StepResult``. The annealing session
calls it after every iteration with the best layout found so far.

``VelocitySink`` drives visual bodies toward that layout: each body gets
a velocity equal to the vector from where it is drawn now to where the
best layout puts it, so nodes drift instead of teleporting.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Protocol, Tuple

from .annealing import Sink, StepResult


class Body(Protocol):
    """Anything with a rendered position that accepts a velocity."""

    @property
    def position(self) -> Tuple[float, float]: ...

    def set_velocity(self, vx: float, vy: float) -> None: ...


@dataclass
class DriftBody:
    """Point body integrating a velocity with optional damping."""
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    damping: float = 0.0  # fraction of velocity lost per unit time

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def set_velocity(self, vx: float, vy: float):
        self.vx, self.vy = vx, vy

    def advance(self, dt: float):
        """Move by velocity * dt, then apply damping."""
        self.x += self.vx * dt
        self.y += self.vy * dt
        if self.damping:
            factor = max(0.0, 1.0 - self.damping * dt)
            self.vx *= factor
            self.vy *= factor


class VelocitySink:
    """Sets each body's velocity toward its position in the best layout."""

    def __init__(self, bodies: Dict[int, Body]):
        self.bodies = bodies

    def __call__(self, result: StepResult):
        best = result.best_state
        for node_id, body in self.bodies.items():
            if node_id not in best:
                continue
            bx, by = best[node_id]
            x, y = body.position
            body.set_velocity(bx - x, by - y)

    def advance(self, dt: float):
        """Integrate bodies that support it (e.g. ``DriftBody``)."""
        for body in self.bodies.values():
            advance = getattr(body, "advance", None)
            if advance:
                advance(dt)

    @classmethod
    def for_positions(cls, positions: Iterable[Tuple[int, Tuple[float, float]]],
                      damping: float = 0.0) -> "VelocitySink":
        """Create a sink with one ``DriftBody`` per node position."""
        return cls({
            node_id: DriftBody(x=x, y=y, damping=damping)
            for node_id, (x, y) in positions
        })


class CompositeSink:
    """Forward every step result to several sinks in order."""

    def __init__(self, *sinks: Sink):
        self.sinks = [s for s in sinks if s is not None]

    def add(self, sink: Sink):
        self.sinks.append(sink)

    def __call__(self, result: StepResult):
        for sink in self.sinks:
            sink(result)
