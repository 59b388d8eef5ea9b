"""Layout visualization for debugging annealing runs.

Captures frames while a session runs (the visualizer is itself a result
sink) and exports:
- a single frame as SVG (nodes, edges, crossing edges highlighted)
- an HTML report with frame-by-frame playback and the energy trace
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union

from ..geometry import segments_intersect, share_endpoint
from ..graph.model import Canvas, Edge, Graph, LayoutState
from .annealing import StepResult

logger = logging.getLogger(__name__)

COLORS = {
    "background": "#1a1a2e",
    "canvas": "#16213e",
    "canvas_border": "#0f3460",
    "edge": "#e0e0e0",
    "crossing": "#e74c3c",
    "node": "#2ecc71",
    "label": "#000000",
    "energy": "#f39c12",
}


@dataclass
class LayoutFrame:
    """A single captured layout."""
    index: int
    label: str
    iteration: int = 0
    temperature: float = 0.0
    current_energy: float = 0.0
    best_energy: float = 0.0
    positions: Dict[int, Tuple[float, float]] = field(default_factory=dict)


class LayoutVisualizer:
    """Collects frames from an annealing session and renders them.

    Usage:
        viz = LayoutVisualizer(graph, canvas, interval=10)
        session = AnnealingSession(graph, sink=viz)
        session.run()
        viz.export_html_report("run.html")
    """

    def __init__(self, graph: Graph, canvas: Optional[Canvas] = None,
                 interval: int = 10, node_radius: float = 6.0,
                 skip_shared_endpoints: bool = False):
        """
        Args:
            graph: Graph whose edges are drawn
            canvas: Drawing area (defaults to the energy's default canvas)
            interval: Capture one frame every N iterations
            node_radius: Node circle radius in canvas units
            skip_shared_endpoints: Do not mark adjacent edges as crossing,
                matching ``EnergyConfig.skip_shared_endpoint_crossings``
        """
        self.graph = graph
        self.canvas = canvas or Canvas()
        self.interval = max(1, interval)
        self.node_radius = node_radius
        self.skip_shared_endpoints = skip_shared_endpoints
        self.frames: List[LayoutFrame] = []

    def capture_frame(self, label: str, state: LayoutState, iteration: int = 0,
                      temperature: float = 0.0, current_energy: float = 0.0,
                      best_energy: float = 0.0) -> LayoutFrame:
        """Record a layout as a new frame."""
        frame = LayoutFrame(
            index=len(self.frames),
            label=label,
            iteration=iteration,
            temperature=temperature,
            current_energy=current_energy,
            best_energy=best_energy,
            positions=dict(state.positions),
        )
        self.frames.append(frame)
        logger.debug("Captured layout frame %d: %s", frame.index, label)
        return frame

    def __call__(self, result: StepResult):
        if result.iteration % self.interval and not result.status.is_finished:
            return
        label = "Final" if result.status.is_finished else f"Iteration {result.iteration}"
        self.capture_frame(
            label,
            result.best_state,
            iteration=result.iteration,
            temperature=result.temperature,
            current_energy=result.current_energy,
            best_energy=result.best_energy,
        )

    def crossing_edges(self, positions: Dict[int, Tuple[float, float]]) -> Set[Edge]:
        """Edges that cross at least one other edge in the given layout."""
        crossing: Set[Edge] = set()
        edges = self.graph.edges
        for i, e1 in enumerate(edges):
            a, b = positions[e1.source], positions[e1.target]
            for e2 in edges[i + 1:]:
                c, d = positions[e2.source], positions[e2.target]
                if self.skip_shared_endpoints and share_endpoint(a, b, c, d):
                    continue
                if segments_intersect(a, b, c, d):
                    crossing.add(e1)
                    crossing.add(e2)
        return crossing

    def render_frame_svg(self, frame: LayoutFrame, width: int = 600) -> str:
        """Render a frame as SVG.

        Args:
            frame: Frame to render
            width: SVG width in pixels (height follows the canvas aspect)

        Returns:
            SVG string
        """
        padding = 20
        scale = width / self.canvas.width
        height = int(self.canvas.height * scale)
        svg_width = width + 2 * padding
        svg_height = height + 2 * padding

        def tx(x: float) -> float:
            return padding + x * scale

        def ty(y: float) -> float:
            return padding + y * scale

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{svg_width}" height="{svg_height}" '
            f'viewBox="0 0 {svg_width} {svg_height}">',
            f'<rect width="100%" height="100%" fill="{COLORS["background"]}"/>',
            f'<rect x="{tx(0)}" y="{ty(0)}" width="{width}" height="{height}" '
            f'fill="{COLORS["canvas"]}" stroke="{COLORS["canvas_border"]}" stroke-width="2"/>',
        ]

        positions = frame.positions
        crossing = self.crossing_edges(positions)
        for edge in self.graph.edges:
            (x1, y1), (x2, y2) = positions[edge.source], positions[edge.target]
            color = COLORS["crossing"] if edge in crossing else COLORS["edge"]
            parts.append(
                f'<line x1="{tx(x1):.2f}" y1="{ty(y1):.2f}" x2="{tx(x2):.2f}" y2="{ty(y2):.2f}" '
                f'stroke="{color}" stroke-width="1.5" class="edge"/>'
            )

        radius = self.node_radius * scale
        for node_id, (x, y) in positions.items():
            parts.append(
                f'<circle cx="{tx(x):.2f}" cy="{ty(y):.2f}" r="{radius:.2f}" '
                f'fill="{COLORS["node"]}" class="node"/>'
            )
            parts.append(
                f'<text x="{tx(x):.2f}" y="{ty(y):.2f}" font-size="{radius:.1f}" '
                f'text-anchor="middle" dominant-baseline="central" '
                f'fill="{COLORS["label"]}">{node_id}</text>'
            )

        parts.append(
            f'<text x="{padding}" y="{padding - 6}" font-size="12" fill="{COLORS["energy"]}">'
            f'{frame.label} | energy {frame.best_energy:.2f} | T {frame.temperature:.3g}</text>'
        )
        parts.append('</svg>')
        return '\n'.join(parts)

    def export_svg(self, path: Union[str, Path], frame: Optional[LayoutFrame] = None) -> Path:
        """Write one frame (the last captured by default) as an SVG file."""
        if frame is None:
            if not self.frames:
                raise ValueError("No frames captured")
            frame = self.frames[-1]
        path = Path(path)
        path.write_text(self.render_frame_svg(frame), encoding="utf-8")
        logger.info("Wrote layout SVG to %s", path)
        return path

    def export_html_report(self, path: Union[str, Path]) -> Path:
        """Export an HTML page with frame playback and the energy trace."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        frames = [
            {
                "label": frame.label,
                "iteration": frame.iteration,
                "temperature": frame.temperature,
                "current_energy": frame.current_energy,
                "best_energy": frame.best_energy,
                "svg": self.render_frame_svg(frame),
            }
            for frame in self.frames
        ]
        html = HTML_TEMPLATE.replace("__FRAMES__", json.dumps(frames))
        path.write_text(html, encoding="utf-8")
        logger.info("Wrote layout report with %d frames to %s", len(frames), path)
        return path


HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<title>Layout Annealing Report</title>
<style>
  body { background: #0f0f1e; color: #e0e0e0; font-family: sans-serif; margin: 20px; }
  #controls { margin: 10px 0; }
  #stats { font-family: monospace; margin: 10px 0; }
  #trace { background: #16213e; }
</style>
</head>
<body>
<h2>Layout Annealing Report</h2>
<div id="controls">
  <button onclick="show(current - 1)">&larr;</button>
  <input type="range" id="slider" min="0" value="0" oninput="show(+this.value)">
  <button onclick="show(current + 1)">&rarr;</button>
  <button onclick="togglePlay()" id="play">Play</button>
</div>
<div id="stats"></div>
<div id="frame"></div>
<h3>Best energy</h3>
<svg id="trace" width="640" height="160"></svg>
<script>
const frames = __FRAMES__;
let current = 0;
let timer = null;
const slider = document.getElementById('slider');
slider.max = Math.max(0, frames.length - 1);

function show(i) {
  if (!frames.length) return;
  current = Math.min(Math.max(i, 0), frames.length - 1);
  const f = frames[current];
  document.getElementById('frame').innerHTML = f.svg;
  document.getElementById('stats').textContent =
    f.label + ' | iteration ' + f.iteration + ' | T ' + f.temperature.toExponential(3) +
    ' | current ' + f.current_energy.toFixed(3) + ' | best ' + f.best_energy.toFixed(3);
  slider.value = current;
}

function togglePlay() {
  const button = document.getElementById('play');
  if (timer) { clearInterval(timer); timer = null; button.textContent = 'Play'; return; }
  button.textContent = 'Pause';
  timer = setInterval(() => {
    if (current >= frames.length - 1) { togglePlay(); return; }
    show(current + 1);
  }, 100);
}

function drawTrace() {
  if (frames.length < 2) return;
  const svg = document.getElementById('trace');
  const w = 640, h = 160, pad = 10;
  const values = frames.map(f => f.best_energy);
  const lo = Math.min(...values), hi = Math.max(...values);
  const span = (hi - lo) || 1;
  const points = values.map((v, i) =>
    (pad + i * (w - 2 * pad) / (values.length - 1)).toFixed(1) + ',' +
    (h - pad - (v - lo) * (h - 2 * pad) / span).toFixed(1)).join(' ');
  svg.innerHTML = '<polyline fill="none" stroke="#f39c12" stroke-width="2" points="' + points + '"/>';
}

show(0);
drawTrace();
</script>
</body>
</html>
"""
