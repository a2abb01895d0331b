"""Configuration management using Pydantic settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Simulation settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "BASTION"
    log_level: str = "INFO"

    # Viewport (screen units, origin top-left)
    viewport_width: float = 1280.0
    viewport_height: float = 720.0

    # Core: sits at the viewport center
    core_radius: float = 30.0
    core_initial_hp: int = 100
    core_collision_damage: int = 10  # per enemy reaching the core

    # Turret projectiles
    projectile_speed: float = 350.0  # units per second
    projectile_radius: float = 5.0
    projectile_damage: int = 10
    fire_interval: float = 0.4  # seconds between shots

    # Frame clock target period for headless runs
    frame_interval: float = 1.0 / 60.0

    # Wave catalog: filesystem path or http(s) URL
    wave_catalog_source: str = "waves.json"
    catalog_fetch_timeout: float = 10.0


settings = Settings()
