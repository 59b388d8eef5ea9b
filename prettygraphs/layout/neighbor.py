"""Candidate generation: jitter every node of a layout."""

import random
from typing import Optional

from ..errors import ConfigurationError
from ..graph.model import LayoutState


def perturb(state: LayoutState, max_jitter: float = 10.0,
            rng: Optional[random.Random] = None) -> LayoutState:
    """
    Build a neighboring layout by moving every node independently.

    Each coordinate is offset by a uniform value in
    ``[-max_jitter, max_jitter]``. The input state is left untouched.

    Args:
        state: Layout to perturb
        max_jitter: Largest offset per axis
        rng: Random source, pass a seeded ``random.Random`` for
            reproducible runs

    Returns:
        New LayoutState with the same node ids
    """
    if not max_jitter >= 0:
        raise ConfigurationError(f"max_jitter must be non-negative, got {max_jitter}")
    rng = rng or random.Random()

    positions = {}
    for node_id, (x, y) in state.items():
        dx = (rng.random() * 2 - 1) * max_jitter
        dy = (rng.random() * 2 - 1) * max_jitter
        positions[node_id] = (x + dx, y + dy)
    return LayoutState(positions)
