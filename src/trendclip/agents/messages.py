"""Auto-expiry timers for transient status messages."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Dict, Mapping

from .state import MessageKind

logger = logging.getLogger(__name__)

ExpireCallback = Callable[[MessageKind, int], None]


class MessageTimers:
    """One cancelable timer per message kind.

    Arming a kind cancels its previous timer first, so only the newest
    message of each kind can expire.
    """

    def __init__(self, delays: Mapping[MessageKind, float], on_expire: ExpireCallback):
        self.delays = dict(delays)
        self.on_expire = on_expire
        self._handles: Dict[MessageKind, asyncio.TimerHandle] = {}

    def arm(self, kind: MessageKind, seq: int) -> None:
        self.cancel(kind)
        loop = asyncio.get_running_loop()
        self._handles[kind] = loop.call_later(self.delays[kind], self._fire, kind, seq)

    def cancel(self, kind: MessageKind) -> None:
        handle = self._handles.pop(kind, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self) -> None:
        for kind in list(self._handles):
            self.cancel(kind)

    def is_armed(self, kind: MessageKind) -> bool:
        return kind in self._handles

    def _fire(self, kind: MessageKind, seq: int) -> None:
        self._handles.pop(kind, None)
        logger.debug("%s message %d expired", kind.value, seq)
        self.on_expire(kind, seq)
