"""
Transition Models

Eased, fixed-length blends between parameter snapshots. A transition can
start from a fixed snapshot or from another transition that is still
running, so a preset recalled mid-animation continues from what is on
screen rather than jumping.
"""

from dataclasses import dataclass
from typing import Callable, Union

from models.enums import TransitionState
from models.parameter_state import ParameterVector

# Steps a preset transition takes (frames at the render rate)
DURATION = 180


# === Easing Functions ===
# Map progress t (0.0-1.0) to a blend factor (0.0-1.0)

def ease_in_out_cubic(t: float) -> float:
    """Cubic ease-in-out (very smooth acceleration/deceleration)"""
    return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2


# === Origins ===

@dataclass(frozen=True)
class SnapshotOrigin:
    """Transition starts from a fixed parameter snapshot"""
    snapshot: ParameterVector


@dataclass(frozen=True)
class ComposerOrigin:
    """Transition starts from another (owned) transition's live output"""
    composer: "TransitionComposer"


TransitionOrigin = Union[SnapshotOrigin, ComposerOrigin]


class TransitionComposer:
    """
    Eased blend from an origin toward a target snapshot

    Runs for exactly `duration` calls to advance(). Each call blends the
    origin's current value toward the target by ease(step / duration), where
    step counts the calls made so far including this one; the last call
    yields the target itself. Once complete, advance() keeps returning the
    target and the step counter stays put.

    When the origin is another composer, advance() advances it too, so the
    superseded transition keeps moving underneath the new one.

    Example:
        t = TransitionComposer(SnapshotOrigin(current), stored)
        while not t.complete:
            state = t.advance()

        # Retarget mid-flight
        t = TransitionComposer(ComposerOrigin(t), other_stored)
    """

    def __init__(
        self,
        origin: TransitionOrigin,
        target: ParameterVector,
        duration: int = DURATION,
        ease_function: Callable[[float], float] = ease_in_out_cubic
    ):
        if not isinstance(origin, (SnapshotOrigin, ComposerOrigin)):
            raise TypeError(f"Unsupported transition origin: {type(origin).__name__}")
        if duration < 1:
            raise ValueError(f"Transition duration must be at least 1 step, got {duration}")

        if isinstance(origin, SnapshotOrigin):
            origin = SnapshotOrigin(origin.snapshot.copy())
        self._origin: TransitionOrigin = origin
        self._target = target.copy()
        self.duration = duration
        self.ease_function = ease_function
        self.step_count = 0

    @classmethod
    def from_snapshot(cls, snapshot: ParameterVector, target: ParameterVector, **kwargs) -> "TransitionComposer":
        return cls(SnapshotOrigin(snapshot), target, **kwargs)

    @classmethod
    def from_composer(cls, composer: "TransitionComposer", target: ParameterVector, **kwargs) -> "TransitionComposer":
        return cls(ComposerOrigin(composer), target, **kwargs)

    @property
    def origin(self) -> TransitionOrigin:
        return self._origin

    @property
    def target(self) -> ParameterVector:
        return self._target.copy()

    @property
    def state(self) -> TransitionState:
        return TransitionState.COMPLETE if self.step_count >= self.duration else TransitionState.RUNNING

    @property
    def complete(self) -> bool:
        return self.state is TransitionState.COMPLETE

    @property
    def progress(self) -> float:
        """Fraction of steps taken (0.0-1.0)"""
        return self.step_count / self.duration

    @property
    def easing_amount(self) -> float:
        """Blend factor of the most recent advance()"""
        return self.ease_function(self.progress)

    @property
    def depth(self) -> int:
        """Number of composers in this chain, including self"""
        depth = 1
        origin = self._origin
        while isinstance(origin, ComposerOrigin):
            depth += 1
            origin = origin.composer.origin
        return depth

    def advance(self) -> ParameterVector:
        """Step the transition and return the blended parameters"""
        if self.complete:
            return self._target.copy()

        base = self._resolve_origin()
        self.step_count += 1

        if self.complete:
            return self._target.copy()

        return base + (self._target - base) * self.easing_amount

    def _resolve_origin(self) -> ParameterVector:
        origin = self._origin
        if isinstance(origin, SnapshotOrigin):
            return origin.snapshot

        base = origin.composer.advance()
        if origin.composer.complete:
            # A finished composer only ever yields its target
            self._origin = SnapshotOrigin(base)
        return base

    def __repr__(self):
        return f"TransitionComposer(step={self.step_count}/{self.duration}, depth={self.depth})"
