"""Live session interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class LiveSession(ABC):
    """A persistent connection from one business application instance."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the underlying transport can currently accept messages."""
        ...

    @abstractmethod
    async def send_json(self, payload: Dict[str, Any]) -> None:
        """Send one JSON message to the client."""
        ...


class RoomHub(ABC):
    """
    Registry of live sessions grouped into rooms by tenant shortcode.

    Implementations must serialize all access to the registry.
    """

    @abstractmethod
    async def join(self, session: LiveSession, shortcode: str) -> None:
        """Add a session to the room for a shortcode, leaving any previous room."""
        ...

    @abstractmethod
    async def leave(self, session: LiveSession) -> Optional[str]:
        """Remove a session from its room; returns the shortcode it left, if any."""
        ...

    @abstractmethod
    async def broadcast(self, shortcode: str, payload: Dict[str, Any]) -> int:
        """Deliver a payload to every open session in a room; returns deliveries."""
        ...
