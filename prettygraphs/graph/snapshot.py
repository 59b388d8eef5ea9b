"""
Layout Snapshot File

Persists an optimized layout as YAML so it can be reloaded as the
starting point of a later run.

File Format (YAML):
```yaml
version: 1
created: 2026-10-19T10:30:00
energy: 42.1875
iteration: 539
canvas:
  width: 256.0
  height: 256.0
positions:
  1: {x: 40.0, y: 60.0}
  2: {x: 120.0, y: 60.0}
```
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..errors import GraphFormatError
from .model import Canvas, LayoutState

logger = logging.getLogger(__name__)

# Snapshot version for format compatibility
SNAPSHOT_VERSION = 1


@dataclass
class LayoutSnapshot:
    """A stored layout with the energy it was scored at."""
    positions: Dict[int, tuple] = field(default_factory=dict)
    energy: Optional[float] = None
    iteration: int = 0
    canvas: Optional[Canvas] = None
    version: int = SNAPSHOT_VERSION
    created: Optional[datetime] = None

    def __post_init__(self):
        if self.created is None:
            self.created = datetime.now()

    @classmethod
    def from_state(cls, state: LayoutState, energy: Optional[float] = None,
                   iteration: int = 0, canvas: Optional[Canvas] = None) -> "LayoutSnapshot":
        return cls(
            positions=dict(state.positions),
            energy=energy,
            iteration=iteration,
            canvas=canvas,
        )

    def to_state(self) -> LayoutState:
        return LayoutState(dict(self.positions))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "version": self.version,
            "created": self.created.isoformat() if self.created else None,
            "energy": round(self.energy, 6) if self.energy is not None else None,
            "iteration": self.iteration,
            "positions": {
                node_id: {"x": round(x, 4), "y": round(y, 4)}
                for node_id, (x, y) in self.positions.items()
            },
        }
        if self.canvas:
            data["canvas"] = self.canvas.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayoutSnapshot":
        """Create from dictionary."""
        version = data.get("version", SNAPSHOT_VERSION)
        if version > SNAPSHOT_VERSION:
            raise GraphFormatError(
                f"Snapshot version {version} is newer than supported ({SNAPSHOT_VERSION})"
            )

        positions = {}
        for node_id, pos in (data.get("positions") or {}).items():
            try:
                positions[int(node_id)] = (float(pos["x"]), float(pos["y"]))
            except (KeyError, TypeError, ValueError) as e:
                raise GraphFormatError(f"Invalid position for node {node_id!r}: {e}") from e

        created = data.get("created")
        if isinstance(created, str):
            try:
                created = datetime.fromisoformat(created)
            except ValueError:
                logger.warning("Ignoring unparseable snapshot timestamp %r", created)
                created = None

        canvas_data = data.get("canvas")
        canvas = None
        if canvas_data:
            try:
                canvas = Canvas(float(canvas_data["width"]), float(canvas_data["height"]))
            except (KeyError, TypeError, ValueError) as e:
                raise GraphFormatError(f"Invalid canvas {canvas_data!r}: {e}") from e

        energy = data.get("energy")
        return cls(
            positions=positions,
            energy=float(energy) if energy is not None else None,
            iteration=int(data.get("iteration", 0)),
            canvas=canvas,
            version=version,
            created=created if isinstance(created, datetime) else None,
        )

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        logger.info("Saved layout snapshot (%d nodes) to %s", len(self.positions), path)
        return path


def save_snapshot(path: Union[str, Path], state: LayoutState,
                  energy: Optional[float] = None, iteration: int = 0,
                  canvas: Optional[Canvas] = None) -> Path:
    """Write a layout snapshot file."""
    return LayoutSnapshot.from_state(state, energy, iteration, canvas).save(path)


def load_snapshot(path: Union[str, Path]) -> LayoutSnapshot:
    """Read a layout snapshot file."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if not isinstance(data, dict):
        raise GraphFormatError(f"{path} is not a layout snapshot")
    return LayoutSnapshot.from_dict(data)
