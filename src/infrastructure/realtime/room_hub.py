"""In-memory implementation of RoomHub."""

import asyncio
from typing import Any, Dict, List, Optional, Set

import structlog

from src.core.metrics import active_rooms, record_broadcast_deliveries
from src.domain.interfaces import LiveSession, RoomHub

logger = structlog.get_logger(__name__)


class InMemoryRoomHub(RoomHub):
    """
    Process-local registry of rooms keyed by tenant shortcode.

    Every read and write of the registry happens under one asyncio lock.
    Broadcasts take a snapshot of the room under the lock and send outside
    it, so a slow client never holds up joins, leaves or other rooms.
    A room is deleted as soon as its last session leaves.
    """

    def __init__(self):
        self._lock = asyncio.Lock()
        self._rooms: Dict[str, Set[LiveSession]] = {}
        self._memberships: Dict[LiveSession, str] = {}

    async def join(self, session: LiveSession, shortcode: str) -> None:
        async with self._lock:
            current = self._memberships.get(session)
            if current == shortcode:
                return
            if current is not None:
                self._discard(session, current)

            self._rooms.setdefault(shortcode, set()).add(session)
            self._memberships[session] = shortcode
            active_rooms.set(len(self._rooms))

        logger.info("room_joined", shortcode=shortcode, previous=current)

    async def leave(self, session: LiveSession) -> Optional[str]:
        async with self._lock:
            shortcode = self._memberships.pop(session, None)
            if shortcode is not None:
                self._discard(session, shortcode)
            active_rooms.set(len(self._rooms))

        if shortcode is not None:
            logger.info("room_left", shortcode=shortcode)
        return shortcode

    async def broadcast(self, shortcode: str, payload: Dict[str, Any]) -> int:
        async with self._lock:
            members = list(self._rooms.get(shortcode, ()))

        if not members:
            logger.info("broadcast_no_room", shortcode=shortcode)
            return 0

        targets = [session for session in members if session.is_open]
        results = await asyncio.gather(
            *(session.send_json(payload) for session in targets),
            return_exceptions=True,
        )

        delivered = 0
        for result in results:
            if isinstance(result, Exception):
                logger.debug("broadcast_send_skipped", shortcode=shortcode, error=str(result))
            else:
                delivered += 1

        record_broadcast_deliveries(delivered)
        logger.info(
            "broadcast_sent",
            shortcode=shortcode,
            members=len(members),
            delivered=delivered,
        )
        return delivered

    async def room_size(self, shortcode: str) -> int:
        """Number of sessions currently in a room."""
        async with self._lock:
            return len(self._rooms.get(shortcode, ()))

    async def room_names(self) -> List[str]:
        """Shortcodes that currently have at least one session."""
        async with self._lock:
            return sorted(self._rooms)

    def _discard(self, session: LiveSession, shortcode: str) -> None:
        # Caller holds the lock.
        members = self._rooms.get(shortcode)
        if members is None:
            return
        members.discard(session)
        if not members:
            del self._rooms[shortcode]


room_hub = InMemoryRoomHub()
