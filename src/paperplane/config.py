"""Mount configuration.

AppConfig is a frozen dataclass — immutable after creation and shared by
every connection a mount serves.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Configuration for a mounted handler. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=3000, max_content_length=64 * 1024)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Request bodies
    max_content_length: int = 1024 * 1024  # 1 MiB
    default_charset: str = "utf-8"

    # Logging
    log_level: str = "info"
