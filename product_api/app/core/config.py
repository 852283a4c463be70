"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts with an empty catalogue and no token check.  In a
deployment you should set at least ``API_TOKEN``; the launcher in
``run.py`` loads a ``.env`` file before this module is imported.
"""

import os
from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Product API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a file that receives a copy of every log line.
    log_file: str = os.getenv("LOG_FILE", "")

    # ``host:port`` the server binds to.  It is also the prefix of the
    # URL written by the request logger.
    server_addr: str = os.getenv("SERVER_ADDR", "localhost:8080")

    # Static token compared verbatim with the ``Authorization`` header.
    # An empty token disables the check, which is only meant for local
    # development and tests.
    api_token: str = os.getenv("API_TOKEN", "")

    # ``strptime``/``strftime`` layout of the ``expiration`` field.
    layout_date: str = os.getenv("LAYOUT_DATE", "%Y-%m-%d")

    # JSON file with the initial catalogue.  Empty means start empty.
    products_file: str = os.getenv("PRODUCTS_FILE", "")

    @property
    def host(self) -> str:
        return self._split_addr()[0]

    @property
    def port(self) -> int:
        return self._split_addr()[1]

    def _split_addr(self) -> Tuple[str, int]:
        host, _, port = self.server_addr.rpartition(":")
        if not port.isdigit():
            raise ValueError(f"SERVER_ADDR must look like host:port, got {self.server_addr!r}")
        # ":8080" binds every interface
        return host or "0.0.0.0", int(port)


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes defaults at class creation time, environment variables
# must be set before importing this module.
settings = Settings()
