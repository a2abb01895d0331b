"""BASTION headless runner.

Wires the EventBus and SimulationEngine together the way a renderer would,
minus the drawing: load the wave catalog in the background, start the
frame clock and fire control, and block until the game ends.
"""

from __future__ import annotations

import random
import sys
import time

from loguru import logger

from bastion import __version__
from bastion.comms.event_bus import EventBus
from bastion.config import Settings, settings as default_settings
from bastion.simulation.engine import SimulationEngine
from bastion.simulation.render_state import RenderState


def configure_logging(level: str = "INFO", sink=None) -> int:
    """Replace loguru's sinks with a single sink (stderr by default) at *level*.

    Returns the loguru handler id.
    """
    logger.remove()
    return logger.add(
        sink if sink is not None else sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan> - <level>{message}</level>",
    )


def build_engine(
    settings: Settings | None = None,
    event_bus: EventBus | None = None,
    seed: int | None = None,
) -> SimulationEngine:
    settings = settings or default_settings
    bus = event_bus or EventBus()
    rng = random.Random(seed) if seed is not None else None
    return SimulationEngine(bus, settings=settings, rng=rng)


def _remaining(deadline: float | None) -> float | None:
    if deadline is None:
        return None
    return max(0.0, deadline - time.monotonic())


def run_headless(
    settings: Settings | None = None,
    timeout: float | None = None,
    event_bus: EventBus | None = None,
    seed: int | None = None,
) -> RenderState:
    """Run one game without a renderer.  Returns the final RenderState.

    Returns early (state still ``playing``) when the catalog cannot be
    loaded or *timeout* elapses.  *timeout* bounds the whole run, catalog
    load included.
    """
    settings = settings or default_settings
    engine = build_engine(settings, event_bus=event_bus, seed=seed)

    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} v{__version__} - HEADLESS")
    logger.info("=" * 60)

    deadline = None if timeout is None else time.monotonic() + timeout
    engine.load_catalog(settings.wave_catalog_source)
    try:
        if not engine.wait_for_catalog(timeout):
            logger.warning(f"Wave catalog did not arrive within {timeout}s")
            return engine.snapshot()
        if engine.catalog_error is not None:
            return engine.snapshot()

        engine.start()
        if not engine.wait_until_finished(_remaining(deadline)):
            logger.warning(f"Game still running after {timeout}s, stopping")
        final = engine.snapshot()
        logger.info(
            f"Finished: {final.state} on wave {final.wave}, core hp {final.core.hp}"
        )
        return final
    finally:
        engine.stop()
