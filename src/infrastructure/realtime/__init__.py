"""Real-time delivery infrastructure."""

from .room_hub import InMemoryRoomHub, room_hub

__all__ = [
    "InMemoryRoomHub",
    "room_hub",
]
