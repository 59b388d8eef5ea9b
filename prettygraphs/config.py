"""
Layout Profiles and Configuration Files

A profile bundles an annealing schedule with energy settings. Named
presets cover the common cases; YAML files can override any field.

File Format (YAML):
```yaml
annealing:
  initial_temperature: 100
  cooling_factor: 0.95
  max_iterations: 2000
  termination: both        # or "either"
energy:
  ideal_length: 20
  min_node_distance: 50
  weights:
    intersections: 2.0
  canvas:
    width: 256
    height: 256
```
"""

import copy
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .errors import ConfigurationError
from .graph.model import Canvas
from .layout.annealing import AnnealingConfig, TerminationMode
from .layout.energy import EnergyConfig, EnergyWeights

logger = logging.getLogger(__name__)


@dataclass
class LayoutProfile:
    """Annealing schedule plus energy configuration."""
    name: str
    description: str = ""
    annealing: AnnealingConfig = field(default_factory=AnnealingConfig)
    energy: EnergyConfig = field(default_factory=EnergyConfig)

    def validate(self):
        self.annealing.validate()
        self.energy.validate()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "annealing": self.annealing.to_dict(),
            "energy": self.energy.to_dict(),
        }


# Pre-defined profiles

SANDBOX = LayoutProfile(
    name="sandbox",
    description="Schedule of the interactive sandbox demo (T0=100, alpha=0.95, 2000 steps)",
    annealing=AnnealingConfig(initial_temperature=100.0, cooling_factor=0.95, max_iterations=2000),
)

QUICK = LayoutProfile(
    name="quick",
    description="Short run that stops at whichever bound comes first",
    annealing=AnnealingConfig(
        initial_temperature=50.0,
        cooling_factor=0.9,
        max_iterations=300,
        min_temperature=1e-3,
        termination=TerminationMode.EITHER,
    ),
)

THOROUGH = LayoutProfile(
    name="thorough",
    description="Slow cooling with smaller moves for a finer final layout",
    annealing=AnnealingConfig(
        initial_temperature=150.0,
        cooling_factor=0.99,
        max_iterations=5000,
        max_jitter=5.0,
    ),
)

PRESETS: Dict[str, LayoutProfile] = {
    "sandbox": SANDBOX,
    "quick": QUICK,
    "thorough": THOROUGH,
}

DEFAULT_PRESET = "sandbox"


def get_preset(name: str) -> LayoutProfile:
    """
    Get a preset profile by name.

    Returns a copy, so callers may adjust it freely.

    Raises:
        ConfigurationError: If the preset name is not found
    """
    if name not in PRESETS:
        available = ", ".join(sorted(PRESETS.keys()))
        raise ConfigurationError(f"Unknown preset '{name}'. Available: {available}")
    return copy.deepcopy(PRESETS[name])


def list_presets() -> List[str]:
    """List all available preset names."""
    return sorted(PRESETS.keys())


def _apply_fields(target: Any, data: Dict[str, Any], section: str,
                  nested: Optional[Dict[str, Any]] = None):
    """Copy known keys from ``data`` onto a config dataclass, coercing types."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping")
    nested = nested or {}
    known = {f.name: f for f in fields(target)}
    for key, value in data.items():
        if key not in known:
            raise ConfigurationError(f"Unknown key '{key}' in section '{section}'")
        if key in nested:
            setattr(target, key, nested[key](getattr(target, key), value, f"{section}.{key}"))
            continue
        current = getattr(target, key)
        try:
            if isinstance(current, bool):
                if not isinstance(value, bool):
                    raise TypeError(f"expected true/false, got {value!r}")
            elif isinstance(current, TerminationMode):
                value = TerminationMode(value)
            elif isinstance(current, int):
                if isinstance(value, bool) or int(value) != value:
                    raise TypeError(f"expected an integer, got {value!r}")
                value = int(value)
            elif isinstance(current, float):
                if isinstance(value, bool):
                    raise TypeError(f"expected a number, got {value!r}")
                value = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for '{section}.{key}': {e}") from e
        setattr(target, key, value)


def _apply_weights(weights: EnergyWeights, data: Dict[str, Any], section: str) -> EnergyWeights:
    _apply_fields(weights, data, section)
    return weights


def _apply_canvas(canvas: Canvas, data: Dict[str, Any], section: str) -> Canvas:
    if not isinstance(data, dict):
        raise ConfigurationError(f"Section '{section}' must be a mapping")
    size = canvas.to_dict()
    for key, value in data.items():
        if key not in size:
            raise ConfigurationError(f"Unknown key '{key}' in section '{section}'")
        try:
            size[key] = float(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for '{section}.{key}': {e}") from e
    return Canvas(**size)


def profile_from_dict(data: Dict[str, Any], base: Optional[LayoutProfile] = None,
                      name: str = "custom") -> LayoutProfile:
    """
    Build a profile by overlaying ``data`` on a base profile.

    Args:
        data: Mapping with optional ``annealing`` and ``energy`` sections
        base: Profile to start from (default preset when omitted)
        name: Name of the resulting profile

    Raises:
        ConfigurationError: On unknown keys, wrong types or invalid values
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")
    unknown = set(data) - {"annealing", "energy"}
    if unknown:
        raise ConfigurationError(f"Unknown configuration section(s): {', '.join(sorted(unknown))}")

    profile = copy.deepcopy(base) if base else get_preset(DEFAULT_PRESET)
    profile.name = name

    if data.get("annealing") is not None:
        _apply_fields(profile.annealing, data["annealing"], "annealing")
    if data.get("energy") is not None:
        _apply_fields(
            profile.energy,
            data["energy"],
            "energy",
            nested={"weights": _apply_weights, "canvas": _apply_canvas},
        )

    profile.validate()
    return profile


def load_config(path: Union[str, Path], base: Optional[LayoutProfile] = None) -> LayoutProfile:
    """Load a YAML configuration file into a profile."""
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Could not parse {path}: {e}") from e
    profile = profile_from_dict(data or {}, base=base, name=path.stem)
    logger.debug("Loaded configuration %s: %s", path, profile.to_dict())
    return profile


def save_config(profile: LayoutProfile, path: Union[str, Path]) -> Path:
    """Write a profile as a YAML configuration file."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(profile.to_dict(), f, default_flow_style=False, sort_keys=False)
    return path
