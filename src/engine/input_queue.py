"""
Input queue - Thread-safe hand-off of asynchronous input to the tick loop

Pointer and orientation callbacks (and remote commands) may fire on any
thread. They only enqueue; the integrator drains the queue at the start of
each tick, so all mutation of the live parameters happens inside tick().
"""

import queue
from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class PointerDelta:
    """Raw pointer movement in pixels"""
    dx: float
    dy: float


@dataclass(frozen=True)
class OrientationDelta:
    """Device attitude change (radians)"""
    yaw: float
    pitch: float
    roll: float


@dataclass(frozen=True)
class StorePresetCommand:
    slot: int


@dataclass(frozen=True)
class RecallPresetCommand:
    slot: int


@dataclass(frozen=True)
class ResetCommand:
    pass


InputCommand = Union[PointerDelta, OrientationDelta, StorePresetCommand, RecallPresetCommand, ResetCommand]


class InputQueue:
    """
    Unbounded FIFO safe to feed from any thread

    Example:
        q = InputQueue()
        q.put(PointerDelta(4.0, -2.0))     # sensor / UI thread
        for command in q.drain():          # tick thread
            ...
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[InputCommand]" = queue.SimpleQueue()

    def put(self, command: InputCommand) -> None:
        self._queue.put(command)

    def drain(self) -> List[InputCommand]:
        """Remove and return everything queued so far, oldest first"""
        commands = []
        while True:
            try:
                commands.append(self._queue.get_nowait())
            except queue.Empty:
                return commands

    def __len__(self) -> int:
        return self._queue.qsize()

    def empty(self) -> bool:
        return self._queue.empty()
