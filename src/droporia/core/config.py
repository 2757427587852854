"""Application configuration utilities.

This module defines application settings loaded from environment variables.
"""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application settings loaded from the environment.

    Notes
    -----
    - Environment variables are read with the ``DROPORIA_`` prefix (e.g., ``DROPORIA_DEBUG``).
    - A plain ``PORT`` variable is honored as well so the service behaves on hosting
      platforms that inject it; see ``get_settings``.
    - ``reject_empty_formats`` lets the request handler decide that a video with no
      downloadable formats is a user-facing failure. The normalizer itself never does.
    """

    model_config = SettingsConfigDict(env_prefix="DROPORIA_", env_file=".env", extra="ignore")

    app_name: str = Field(default="Droporia", description="Application display name")
    debug: bool = Field(default=False, description="Enable debug mode")
    host: str = Field(default="127.0.0.1", description="Interface the HTTP server binds to")
    port: int = Field(default=3001, description="Port the HTTP server listens on")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser",
    )

    extractor_noplaylist: bool = Field(
        default=True,
        description="Resolve only the single video when a URL also references a playlist",
    )
    extractor_socket_timeout: float | None = Field(
        default=None,
        description="Socket timeout in seconds passed to yt-dlp; None keeps yt-dlp's default",
    )
    reject_empty_formats: bool = Field(
        default=False,
        description="Report a video without downloadable formats as not found",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache application settings.

    Notes
    -----
    - Cached with ``functools.lru_cache(maxsize=1)`` to provide a single settings instance
      across the process. Subsequent calls return the same object.
    - ``PORT`` overrides the default port only when ``DROPORIA_PORT`` is not set.

    Returns
    -------
    Settings
        The application settings instance.
    """

    settings: Settings = Settings()
    port_env: str | None = os.environ.get("PORT")
    if port_env and "DROPORIA_PORT" not in os.environ:
        try:
            settings.port = int(port_env)
        except ValueError:
            # Keep the configured port when PORT is not numeric
            pass
    return settings
