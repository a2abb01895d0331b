"""Simulation subsystem — engine, wave director, fire control, clocks."""
from .arena import EntityArena
from .catalog import CatalogUnavailable, EnemyGroup, Wave, WaveCatalog, load_wave_catalog
from .clock import FrameClock, PeriodicTask
from .combat import FireController, find_hits, nearest_enemy
from .engine import FrameReport, SimulationEngine
from .entities import Core, Enemy, Projectile
from .game_mode import GameState, WaveDirector
from .render_state import CoreState, EnemyState, ProjectileState, RenderState

__all__ = [
    "CatalogUnavailable",
    "Core",
    "CoreState",
    "Enemy",
    "EnemyGroup",
    "EnemyState",
    "EntityArena",
    "FireController",
    "FrameClock",
    "FrameReport",
    "GameState",
    "PeriodicTask",
    "Projectile",
    "ProjectileState",
    "RenderState",
    "SimulationEngine",
    "Wave",
    "WaveCatalog",
    "WaveDirector",
    "find_hits",
    "load_wave_catalog",
    "nearest_enemy",
]
