"""
main_asyncio.py - Application entry point for the feedback controls
-------------------------------------------------------------------

Responsible for:
- loading configuration and presets
- wiring dependencies (Dependency Injection)
- starting the frame loop, keyboard input and the API server
- graceful shutdown on Ctrl+C or fatal errors
"""

import asyncio
import sys

import uvicorn
from fastapi import FastAPI

from api.main import create_app
from api.dependencies import set_service_container
from engine.frame_clock import FrameClock, LoggingRenderTarget
from engine.parameter_integrator import ParameterIntegrator
from hardware.input.keyboard import HeldKeys, start_keyboard
from lifecycle import ShutdownCoordinator
from lifecycle.handlers import FrameClockShutdownHandler, PresetSaveShutdownHandler, TaskCancellationHandler
from managers import ConfigManager, PresetStore
from models.enums import LogCategory
from services import EventBus, PresetPersistence, log_middleware
from services.service_container import ServiceContainer
from utils.logger import get_logger, configure_logger

log = get_logger().for_category(LogCategory.SYSTEM)


# ---------------------------------------------------------------------------
# API SERVER RUNNER
# ---------------------------------------------------------------------------

async def run_api_server(app: FastAPI, host: str = "127.0.0.1", port: int = 8000) -> None:
    """
    Run FastAPI/Uvicorn server in the asyncio event loop.

    Disables uvicorn's own signal handlers so the shutdown coordinator stays
    in charge. Runs until cancelled.
    """
    config = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        loop="asyncio",
        log_level="warning",
        access_log=False,
    )

    server = uvicorn.Server(config)
    server.install_signal_handlers = lambda: None

    log.debug(f"Starting API server on {host}:{port}")
    await server.serve()


# ---------------------------------------------------------------------------
# Application Entry
# ---------------------------------------------------------------------------

async def main():
    """Main async entry point (dependency injection and event loop startup)."""

    # ========================================================================
    # 1. CONFIGURATION
    # ========================================================================

    config_manager = ConfigManager()
    config = config_manager.load()
    configure_logger(config.logging.level, config.logging.colors, config.logging.categories)

    log.info("Starting feedback controls...")

    event_bus = EventBus()
    event_bus.add_middleware(log_middleware)

    # ========================================================================
    # 2. PRESETS
    # ========================================================================

    preset_store = PresetStore()
    persistence = PresetPersistence(
        preset_store,
        event_bus,
        config_manager.presets_path(),
        enabled=config.presets.persist
    )
    await persistence.load()

    # ========================================================================
    # 3. CONTROLS & FRAME CLOCK
    # ========================================================================

    integrator = ParameterIntegrator(
        integration=config.integration,
        transition=config.transition,
        presets=preset_store
    )
    held_keys = HeldKeys()

    frame_clock = FrameClock(
        integrator,
        held_keys,
        event_bus,
        fps=config.render.fps,
        viewport=config.render.viewport,
        time_step=config.render.time_step
    )
    frame_clock.add_render_target(LoggingRenderTarget(every=config.render.fps))

    services = ServiceContainer(
        config_manager=config_manager,
        integrator=integrator,
        preset_store=preset_store,
        held_keys=held_keys,
        event_bus=event_bus,
        frame_clock=frame_clock
    )
    set_service_container(services)

    await frame_clock.start()

    # ========================================================================
    # 4. INPUT & API
    # ========================================================================

    tasks = [asyncio.create_task(start_keyboard(held_keys, event_bus), name="Keyboard")]

    if config.api.enabled:
        app = create_app(cors_origins=config.api.cors_origins)
        tasks.append(asyncio.create_task(
            run_api_server(app, config.api.host, config.api.port),
            name="API server"
        ))
        log.info("API server started", host=config.api.host, port=config.api.port)

    # ========================================================================
    # 5. SHUTDOWN COORDINATOR
    # ========================================================================

    coordinator = ShutdownCoordinator()
    coordinator.register(FrameClockShutdownHandler(frame_clock))
    coordinator.register(PresetSaveShutdownHandler(persistence))
    coordinator.register(TaskCancellationHandler(tasks))

    coordinator.setup_signal_handlers(asyncio.get_running_loop())

    log.info("Application initialized. Waiting for exit signal...")
    await coordinator.wait_for_shutdown(critical_tasks=tasks)

    await coordinator.shutdown_all()
    set_service_container(None)
    log.info("Feedback controls shut down cleanly.")


# ---------------------------------------------------------------------------
# ENTRY POINT
# ---------------------------------------------------------------------------
def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
    except Exception as e:
        log.error(f"Fatal error: {e}", error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    run()
