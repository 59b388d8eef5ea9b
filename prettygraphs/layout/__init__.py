"""Layout optimization: energy, candidate generation and simulated annealing."""

from .energy import EnergyBreakdown, EnergyConfig, EnergyWeights, LayoutEnergy, calculate_energy
from .neighbor import perturb
from .annealing import (
    AnnealingConfig,
    AnnealingResult,
    AnnealingSession,
    SessionStatus,
    StepResult,
    TerminationMode,
    optimize_layout,
)
from .sink import CompositeSink, DriftBody, VelocitySink
from .visualizer import LayoutFrame, LayoutVisualizer

__all__ = [
    "EnergyBreakdown",
    "EnergyConfig",
    "EnergyWeights",
    "LayoutEnergy",
    "calculate_energy",
    "perturb",
    "AnnealingConfig",
    "AnnealingResult",
    "AnnealingSession",
    "SessionStatus",
    "StepResult",
    "TerminationMode",
    "optimize_layout",
    "CompositeSink",
    "DriftBody",
    "VelocitySink",
    "LayoutFrame",
    "LayoutVisualizer",
]
