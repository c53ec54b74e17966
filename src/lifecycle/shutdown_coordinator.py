"""
Shutdown coordinator that orchestrates graceful shutdown of all components.

Manages signal handlers, shutdown sequencing, and error handling across
multiple shutdown handlers in priority order.
"""

import asyncio
import signal
from typing import List, Optional, Protocol, Set, runtime_checkable
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.SYSTEM)


@runtime_checkable
class IShutdownHandler(Protocol):
    """
    A component that takes part in shutdown

    Handlers with a higher shutdown_priority run earlier.
    """

    @property
    def shutdown_priority(self) -> int:
        ...

    async def shutdown(self) -> None:
        ...


class ShutdownCoordinator:
    """
    Coordinates graceful shutdown of multiple components.

    Example:
        coordinator = ShutdownCoordinator()
        coordinator.register(FrameClockShutdownHandler(clock))
        coordinator.register(TaskCancellationHandler([keyboard_task, api_task]))

        coordinator.setup_signal_handlers(loop)
        await coordinator.wait_for_shutdown(critical_tasks=[keyboard_task, api_task])
        await coordinator.shutdown_all()
    """

    def __init__(self, timeout_per_handler: float = 5.0, total_timeout: float = 15.0):
        """
        Args:
            timeout_per_handler: Timeout for each individual handler (seconds)
            total_timeout: Total timeout for entire shutdown sequence (seconds)
        """
        self._handlers: List[IShutdownHandler] = []
        self._shutdown_event = asyncio.Event()
        self._timeout_per_handler = timeout_per_handler
        self._total_timeout = total_timeout
        self.reason: Optional[str] = None

    def register(self, handler: IShutdownHandler) -> None:
        """
        Register a shutdown handler.

        Raises:
            ValueError: If handler does not implement IShutdownHandler
        """
        if not isinstance(handler, IShutdownHandler):
            raise ValueError(f"{type(handler).__name__} is not a shutdown handler (needs shutdown_priority and shutdown())")

        self._handlers.append(handler)
        log.debug(f"Registered shutdown handler: {handler.__class__.__name__}")

    def setup_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        """Install SIGINT (Ctrl+C) and SIGTERM handlers"""
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda s=sig: self.trigger(s.name))

        log.info("Signal handlers installed (SIGINT, SIGTERM)")

    def trigger(self, reason: str) -> None:
        """Request shutdown (signal, fatal error, API)"""
        if self._shutdown_event.is_set():
            return
        self.reason = reason
        log.info(f"Shutdown requested: {reason}")
        self._shutdown_event.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_event.is_set()

    async def wait_for_shutdown(self, critical_tasks: Optional[List[asyncio.Task]] = None) -> None:
        """
        Wait for a shutdown request or for a critical task to fail

        A critical task that finishes cleanly is dropped from monitoring; one
        that raises triggers shutdown.
        """
        pending: Set[asyncio.Task] = set(critical_tasks or [])

        while not self._shutdown_event.is_set():
            shutdown_waiter = asyncio.create_task(self._shutdown_event.wait())
            try:
                done, _ = await asyncio.wait(pending | {shutdown_waiter}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                if not shutdown_waiter.done():
                    shutdown_waiter.cancel()

            for task in done:
                if task is shutdown_waiter:
                    continue
                pending.discard(task)
                if task.cancelled():
                    continue
                error = task.exception()
                if error is not None:
                    log.error(f"Critical task failed: {task.get_name()}", error=str(error))
                    self.trigger(f"Task failure: {task.get_name()}")
                else:
                    log.debug(f"Critical task completed cleanly: {task.get_name()}")

    async def shutdown_all(self) -> None:
        """
        Run all handlers in descending priority order.

        Each handler gets timeout_per_handler; the whole sequence stops
        after total_timeout. A failing handler does not stop the rest.
        """
        log.info("Initiating graceful shutdown sequence...", reason=self.reason or "UNKNOWN")

        sorted_handlers = sorted(self._handlers, key=lambda h: h.shutdown_priority, reverse=True)
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        for handler in sorted_handlers:
            handler_name = handler.__class__.__name__

            elapsed = loop.time() - start_time
            if elapsed > self._total_timeout:
                log.error(f"Total shutdown timeout exceeded ({elapsed:.1f}s > {self._total_timeout}s)")
                break

            try:
                log.debug(f"Shutting down {handler_name} (priority={handler.shutdown_priority})...")
                await asyncio.wait_for(handler.shutdown(), timeout=self._timeout_per_handler)
                log.debug(f"{handler_name} shutdown complete")

            except asyncio.TimeoutError:
                log.error(f"{handler_name} shutdown timeout ({self._timeout_per_handler}s)")

            except Exception as e:
                log.error(f"Error shutting down {handler_name}: {e}", error_type=type(e).__name__)

        log.info("Shutdown sequence complete")
