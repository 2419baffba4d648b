"""In-memory log of completed clip-generation sessions."""

from __future__ import annotations

import itertools
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from ..models.trends import ClipSession, GenerationResult, pair_clips

logger = logging.getLogger(__name__)


_session_counter = itertools.count(1)


def new_session_id() -> str:
    """Time-derived session id, unique within the process."""
    return f"session_{time.time_ns() // 1_000_000}_{next(_session_counter)}"


def build_session(result: GenerationResult, now: Optional[datetime] = None) -> ClipSession:
    """Freeze a generation result into a history record."""
    pairs, leftover = pair_clips(result.clips, result.artifact_files)
    generated_at = (now or datetime.now(timezone.utc)).isoformat()
    session = ClipSession(
        id=new_session_id(),
        source_video_title=result.source_video_title,
        pairs=pairs,
        unpaired_artifacts=leftover,
        total_clips=result.total_clips_generated,
        processing_summary=result.processing_summary,
        generated_at=generated_at,
    )
    if session.count_mismatch:
        logger.warning(
            "Session %s declares %d clips but %d were returned",
            session.id, session.total_clips, len(pairs),
        )
    return session


@dataclass
class SessionHistory:
    """Newest-first, append-only list of sessions.

    Sessions are never evicted or deduplicated. ``expanded_id`` is view state
    only; toggling it never touches the stored sessions.
    """

    _sessions: List[ClipSession] = field(default_factory=list)
    expanded_id: Optional[str] = None

    @property
    def sessions(self) -> Tuple[ClipSession, ...]:
        return tuple(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def prepend(self, session: ClipSession) -> None:
        """Record a new session at the front."""
        self._sessions.insert(0, session)
        logger.info("History: %s (%d clips), %d sessions total",
                    session.source_video_title, len(session.pairs), len(self._sessions))

    def get(self, session_id: str) -> Optional[ClipSession]:
        for session in self._sessions:
            if session.id == session_id:
                return session
        return None

    def toggle_expanded(self, session_id: str) -> None:
        """Expand ``session_id``, or collapse it if it is already expanded."""
        self.expanded_id = None if self.expanded_id == session_id else session_id

    @property
    def expanded(self) -> Optional[ClipSession]:
        if self.expanded_id is None:
            return None
        return self.get(self.expanded_id)
