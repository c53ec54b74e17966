"""
FrameClock - Fixed-rate driver for the feedback controls.

Each frame:
  1. Snapshot held keys
  2. ParameterIntegrator.tick()
  3. Build RenderUniforms (time advances by time_step)
  4. Hand uniforms to every registered render target
  5. Publish the integrator's domain events on the EventBus

Supports pause, single-frame stepping and FPS changes (exposed under /system).
"""

from __future__ import annotations
import asyncio
import time
from collections import deque
from typing import Deque, Dict, List, Optional, Protocol, Tuple

from engine.parameter_integrator import ParameterIntegrator
from hardware.input.keyboard.held_keys import HeldKeys
from models.enums import LogCategory, LogLevel
from models.uniforms import RenderUniforms
from services.event_bus import EventBus
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.RENDER)


class IRenderTarget(Protocol):
    """Anything that consumes one frame's uniforms (GPU pipeline, preview, recorder)"""

    def render(self, uniforms: RenderUniforms) -> None:
        ...


class LoggingRenderTarget:
    """
    Render target that only logs uniforms

    Stands in for the GPU pipeline on headless machines. Logs every
    `every`-th frame at DEBUG.
    """

    def __init__(self, every: int = 30):
        self.every = max(1, every)
        self.frames = 0
        self.last: Optional[RenderUniforms] = None

    def render(self, uniforms: RenderUniforms) -> None:
        self.frames += 1
        self.last = uniforms
        if self.frames % self.every == 0 and log.is_enabled(LogLevel.DEBUG):
            log.debug("Uniforms", frame=self.frames, **uniforms.to_dict())


class FrameClock:
    """
    Fixed-rate frame loop

    Example:
        clock = FrameClock(integrator, held_keys, event_bus, fps=30)
        clock.add_render_target(LoggingRenderTarget())
        await clock.start()
        ...
        await clock.stop()
    """

    def __init__(
        self,
        integrator: ParameterIntegrator,
        held_keys: HeldKeys,
        event_bus: Optional[EventBus] = None,
        fps: int = 30,
        viewport: Tuple[int, int] = (640, 360),
        time_step: float = 0.01
    ):
        """
        Args:
            integrator: Parameter integrator ticked once per frame
            held_keys: Held-key tracker fed by the keyboard adapter
            event_bus: Where integrator events are published (optional)
            fps: Target frame rate (1-240)
            viewport: Output size in pixels
            time_step: Uniform time increment per frame
        """
        self.integrator = integrator
        self.held_keys = held_keys
        self.event_bus = event_bus
        self.fps = max(1, min(fps, 240))
        self.time_step = time_step
        self.time = 0.0

        self.render_targets: List[IRenderTarget] = []
        self.viewport = viewport
        self.integrator.set_viewport_size(*viewport)

        self.running = False
        self.paused = False
        self.step_requested = False
        self.render_task: Optional[asyncio.Task] = None

        self.frames_rendered = 0
        self.frame_times: Deque[float] = deque(maxlen=300)
        self.last_uniforms: Optional[RenderUniforms] = None

        log.info("FrameClock initialized", fps=self.fps, viewport=f"{viewport[0]}x{viewport[1]}")

    # === Render targets ===

    def add_render_target(self, target: IRenderTarget) -> None:
        if target in self.render_targets:
            log.warn("Render target already registered", target=type(target).__name__)
            return
        self.render_targets.append(target)

    def set_viewport(self, width: int, height: int) -> None:
        """Resize output; pointer scaling follows"""
        self.viewport = (width, height)
        self.integrator.set_viewport_size(width, height)
        log.info("Viewport resized", width=width, height=height)

    # === Control API ===

    def pause(self) -> None: self.paused = True

    def resume(self) -> None: self.paused = False

    def step_frame(self) -> None: self.step_requested = True

    def set_fps(self, fps: int) -> None:
        self.fps = max(1, min(fps, 240))
        log.info(f"FrameClock FPS set to {self.fps}")

    # === Lifecycle ===

    async def start(self) -> None:
        if self.running:
            log.warn("FrameClock already running")
            return

        self.running = True
        self.render_task = asyncio.create_task(self._render_loop())
        log.info(f"FrameClock started @ {self.fps} FPS")

    async def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        if self.render_task:
            self.render_task.cancel()
            try:
                await self.render_task
            except asyncio.CancelledError:
                pass
            self.render_task = None

        log.info("FrameClock stopped", frames_rendered=self.frames_rendered)

    # === Metrics ===

    def get_actual_fps(self) -> float:
        if len(self.frame_times) < 2:
            return 0.0
        duration = self.frame_times[-1] - self.frame_times[0]
        if duration <= 0:
            return 0.0
        return len(self.frame_times) / duration

    def get_metrics(self) -> Dict:
        return {
            "fps_target": self.fps,
            "fps_actual": self.get_actual_fps(),
            "frames_rendered": self.frames_rendered,
            "time": self.time,
            "running": self.running,
            "paused": self.paused,
        }

    # === Frame ===

    async def step(self) -> RenderUniforms:
        """Run exactly one frame"""
        state = self.integrator.tick(self.held_keys.snapshot())

        self.time += self.time_step
        uniforms = RenderUniforms.from_state(state, self.viewport, self.time)
        self.last_uniforms = uniforms

        for target in self.render_targets:
            try:
                target.render(uniforms)
            except Exception as e:
                log.error(f"Render error on {type(target).__name__}: {e}")

        events = self.integrator.pop_events()
        if self.event_bus and events:
            await self.event_bus.publish_all(events)

        self.frames_rendered += 1
        self.frame_times.append(time.perf_counter())
        return uniforms

    async def _render_loop(self) -> None:
        log.info(f"Frame loop @ {self.fps} FPS (delay={1000 / self.fps:.2f}ms)")

        while self.running:
            if self.paused and not self.step_requested:
                await asyncio.sleep(0.01)
                continue

            started = time.perf_counter()
            try:
                await self.step()
            except Exception as e:
                log.error(f"Frame error: {e}", error_type=type(e).__name__)

            self.step_requested = False

            elapsed = time.perf_counter() - started
            await asyncio.sleep(max(0.0, 1.0 / self.fps - elapsed))
