"""Response cache interface."""

from typing import Protocol


class ResponseCache(Protocol):
    """Time-boxed store for serialized response bodies.

    Entries expire `ttl` seconds after insertion; reads never extend that.
    """

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl: int) -> None: ...

    async def close(self) -> None: ...
