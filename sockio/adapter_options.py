"""Configuration for the Redis broadcast adapter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RedisAdapterOptions:
    """Settings used to create a Redis adapter.

    ``host`` and ``port`` are deprecated in favour of ``addr``.
    """

    host: str = ""
    port: str = ""
    addr: str = ""
    prefix: str = ""
    network: str = ""
    password: str = ""
    db: int = 0

    def get_addr(self) -> str:
        """Return the address, building it from host and port when unset."""
        if not self.addr:
            self.addr = f"{self.host}:{self.port}"
        return self.addr


def default_options() -> RedisAdapterOptions:
    """Return the default adapter options."""
    return RedisAdapterOptions(addr="127.0.0.1:6379", prefix="socket.io", network="tcp")


def get_options(opts: RedisAdapterOptions | None) -> RedisAdapterOptions:
    """Return default options overridden by the non-empty fields of ``opts``."""
    options = default_options()
    if opts is not None:
        for name in ("host", "port", "addr", "prefix", "network", "password"):
            value = getattr(opts, name)
            if value:
                setattr(options, name, value)
    return options