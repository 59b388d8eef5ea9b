"""
Simulated Annealing Layout Optimizer

Searches node positions that minimise the layout energy. Each iteration
jitters the whole layout, scores the candidate and accepts it when it
lowers the energy, or otherwise with the Metropolis probability
``exp(-dE / T)``. The temperature decays geometrically. The lowest-energy
layout seen so far is kept as ``best`` and handed to the result sink after
every iteration, so a renderer can drift toward it continuously.

The session is stepped explicitly; pacing (tight loop, timer tick, async
task) is up to the caller:

    session = AnnealingSession(graph, AnnealingConfig(max_iterations=500))
    while not session.status.is_finished:
        step = session.step()

or simply ``session.run()``.
"""

import logging
import math
import random
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ..errors import ConfigurationError, SessionStateError
from ..graph.model import Graph, LayoutState
from .energy import EnergyConfig, LayoutEnergy
from .neighbor import perturb

logger = logging.getLogger(__name__)


class SessionStatus(Enum):
    """Lifecycle of an annealing session."""
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    CANCELLED = "cancelled"

    @property
    def is_finished(self) -> bool:
        return self in (SessionStatus.CONVERGED, SessionStatus.CANCELLED)


class TerminationMode(Enum):
    """How the temperature floor and iteration budget combine."""
    BOTH = "both"      # stop once both bounds are reached
    EITHER = "either"  # stop as soon as one bound is reached


@dataclass
class AnnealingConfig:
    """Configuration for the annealing schedule."""
    initial_temperature: float = 100.0
    cooling_factor: float = 0.95
    max_iterations: int = 2000
    min_temperature: float = 1e-10
    max_jitter: float = 10.0  # per-axis offset of the neighbor generator
    termination: TerminationMode = TerminationMode.BOTH

    def validate(self):
        """Raise ConfigurationError on parameters that cannot run."""
        if not self.initial_temperature > 0:
            raise ConfigurationError(
                f"initial_temperature must be positive, got {self.initial_temperature}"
            )
        if not 0 < self.cooling_factor < 1:
            raise ConfigurationError(
                f"cooling_factor must be within (0, 1), got {self.cooling_factor}"
            )
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ConfigurationError(
                f"max_iterations must be an integer, got {self.max_iterations!r}"
            )
        if self.max_iterations <= 0:
            raise ConfigurationError(
                f"max_iterations must be positive, got {self.max_iterations}"
            )
        if not self.min_temperature >= 0:
            raise ConfigurationError(
                f"min_temperature must be non-negative, got {self.min_temperature}"
            )
        if not self.max_jitter >= 0:
            raise ConfigurationError(f"max_jitter must be non-negative, got {self.max_jitter}")
        if not isinstance(self.termination, TerminationMode):
            raise ConfigurationError(f"Unknown termination mode {self.termination!r}")

    def to_dict(self) -> Dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data["termination"] = self.termination.value
        return data


@dataclass
class StepResult:
    """Outcome of one annealing iteration.

    ``iteration`` counts completed iterations (1 for the first step).
    ``temperature`` is the temperature this iteration ran at, before
    cooling; the session's ``temperature`` already holds the next one.
    """
    iteration: int
    temperature: float
    current_energy: float
    best_energy: float
    best_state: LayoutState
    accepted: bool = False
    improved: bool = False  # best was replaced this iteration
    status: SessionStatus = SessionStatus.RUNNING


@dataclass
class AnnealingResult:
    """Summary of a finished (or cancelled) session."""
    status: SessionStatus
    iterations: int
    temperature: float
    initial_energy: float
    best_energy: float
    best_state: LayoutState
    accepted_moves: int = 0
    energy_history: List[float] = field(default_factory=list)  # best energy per iteration

    @property
    def converged(self) -> bool:
        return self.status == SessionStatus.CONVERGED

    @property
    def improvement(self) -> float:
        return self.initial_energy - self.best_energy


Sink = Callable[[StepResult], None]


class AnnealingSession:
    """
    One simulated-annealing run over a fixed graph topology.

    Owns the temperature, iteration counter, the current and best layouts
    and their energies. Nothing else writes them.

    States: IDLE -> RUNNING -> CONVERGED | CANCELLED. Invalid configuration
    raises ConfigurationError here, so a bad session never starts.
    """

    def __init__(
        self,
        graph: Graph,
        config: Optional[AnnealingConfig] = None,
        energy_config: Optional[EnergyConfig] = None,
        rng: Optional[random.Random] = None,
        initial_state: Optional[LayoutState] = None,
        sink: Optional[Sink] = None,
    ):
        self.graph = graph
        self.config = config or AnnealingConfig()
        self.config.validate()
        self.energy = LayoutEnergy(graph, energy_config)
        self.rng = rng or random.Random()
        self.sink = sink

        state = initial_state or graph.initial_state()
        missing = [nid for nid in graph.node_ids if nid not in state]
        if missing:
            raise ConfigurationError(f"Initial layout has no position for node(s) {missing}")

        self._status = SessionStatus.IDLE
        self._temperature = self.config.initial_temperature
        self._iteration = 0
        self._accepted_moves = 0

        self._current = state
        self._current_energy = self.energy.evaluate(state)
        self._best = state
        self._best_energy = self._current_energy
        self._initial_energy = self._current_energy
        self._history: List[float] = []

    # -- read-only views -------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def temperature(self) -> float:
        return self._temperature

    @property
    def iteration(self) -> int:
        return self._iteration

    @property
    def current_state(self) -> LayoutState:
        return self._current

    @property
    def current_energy(self) -> float:
        return self._current_energy

    @property
    def best_state(self) -> LayoutState:
        return self._best

    @property
    def best_energy(self) -> float:
        return self._best_energy

    @property
    def initial_energy(self) -> float:
        return self._initial_energy

    # -- lifecycle -------------------------------------------------------

    def start(self):
        """Enter RUNNING. Called implicitly by the first ``step()``."""
        if self._status != SessionStatus.IDLE:
            raise SessionStateError(f"Cannot start a session that is {self._status.value}")
        self._status = SessionStatus.RUNNING
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Annealing start: nodes=%d edges=%d T0=%.3g alpha=%.4f max_iter=%d "
                "termination=%s energy=%.3f",
                len(self.graph),
                len(self.graph.edges),
                self.config.initial_temperature,
                self.config.cooling_factor,
                self.config.max_iterations,
                self.config.termination.value,
                self._current_energy,
            )
        if self._termination_reached():
            self._finish(SessionStatus.CONVERGED)

    def cancel(self):
        """Stop the session before its next iteration."""
        if self._status.is_finished:
            return
        self._finish(SessionStatus.CANCELLED)

    def step(self) -> StepResult:
        """
        Advance exactly one iteration.

        Returns:
            StepResult carrying the best layout found so far

        Raises:
            SessionStateError: If the session already converged or was cancelled
        """
        if self._status == SessionStatus.IDLE:
            self.start()
        if self._status.is_finished:
            raise SessionStateError(f"Session is {self._status.value}; no more steps")

        candidate = perturb(self._current, self.config.max_jitter, self.rng)
        candidate_energy = self.energy.evaluate(candidate)
        delta = candidate_energy - self._current_energy

        accepted = False
        improved = False
        if delta < 0:
            accepted = True
            if candidate_energy < self._best_energy:
                self._best = candidate
                self._best_energy = candidate_energy
                improved = True
        elif self.rng.random() < self._acceptance_probability(delta):
            accepted = True

        if accepted:
            self._current = candidate
            self._current_energy = candidate_energy
            self._accepted_moves += 1

        self._history.append(self._best_energy)
        temperature = self._temperature
        self._temperature *= self.config.cooling_factor
        self._iteration += 1

        if self._termination_reached():
            self._finish(SessionStatus.CONVERGED)

        result = StepResult(
            iteration=self._iteration,
            temperature=temperature,
            current_energy=self._current_energy,
            best_energy=self._best_energy,
            best_state=self._best,
            accepted=accepted,
            improved=improved,
            status=self._status,
        )

        if self.sink:
            self.sink(result)

        if logger.isEnabledFor(logging.DEBUG) and self._iteration % 100 == 0:
            logger.debug(
                "Iteration %d: T=%.4g current=%.3f best=%.3f accepted=%d",
                self._iteration,
                temperature,
                self._current_energy,
                self._best_energy,
                self._accepted_moves,
            )
        return result

    def run(
        self,
        callback: Optional[Sink] = None,
        should_cancel: Optional[Callable[["AnnealingSession"], bool]] = None,
    ) -> AnnealingResult:
        """
        Step until the session converges or is cancelled.

        Args:
            callback: Called with every StepResult (in addition to the sink)
            should_cancel: Polled before each iteration; returning True
                cancels the session

        Returns:
            AnnealingResult summarising the run
        """
        if self._status == SessionStatus.IDLE:
            self.start()

        while not self._status.is_finished:
            if should_cancel and should_cancel(self):
                self.cancel()
                break
            result = self.step()
            if callback:
                callback(result)

        if self._best_energy >= self._initial_energy and self._iteration > 0:
            logger.warning(
                "Annealing made no improvement after %d iterations (energy=%.3f). "
                "Consider raising the temperature or the jitter.",
                self._iteration,
                self._best_energy,
            )
        return self.result()

    def result(self) -> AnnealingResult:
        """Snapshot of the session so far."""
        return AnnealingResult(
            status=self._status,
            iterations=self._iteration,
            temperature=self._temperature,
            initial_energy=self._initial_energy,
            best_energy=self._best_energy,
            best_state=self._best,
            accepted_moves=self._accepted_moves,
            energy_history=list(self._history),
        )

    # -- internals -------------------------------------------------------

    def _acceptance_probability(self, delta: float) -> float:
        """Metropolis criterion for a non-improving move."""
        if self._temperature <= 0:
            return 0.0
        return math.exp(-delta / self._temperature)

    def _termination_reached(self) -> bool:
        cold = self._temperature <= self.config.min_temperature
        exhausted = self._iteration >= self.config.max_iterations
        if self.config.termination == TerminationMode.EITHER:
            return cold or exhausted
        return cold and exhausted

    def _finish(self, status: SessionStatus):
        self._status = status
        if status == SessionStatus.CONVERGED:
            logger.info(
                "Annealing converged after %d iterations: energy %.3f -> %.3f",
                self._iteration,
                self._initial_energy,
                self._best_energy,
            )
        else:
            logger.info(
                "Annealing cancelled at iteration %d (best energy %.3f)",
                self._iteration,
                self._best_energy,
            )


def optimize_layout(
    graph: Graph,
    config: Optional[AnnealingConfig] = None,
    energy_config: Optional[EnergyConfig] = None,
    rng: Optional[random.Random] = None,
    callback: Optional[Sink] = None,
) -> AnnealingResult:
    """Run a full annealing session from the graph's own positions."""
    session = AnnealingSession(graph, config, energy_config, rng=rng)
    return session.run(callback=callback)
