"""
Session Registry.

Keeps one ColoringSession per open activity. The host opens a session when
the user starts coloring an activity and closes it when the coloring view
is dismissed; closing releases the session's buffers.

There is no module-level registry: the host creates and owns its own
instance.

Classes:
    SessionRegistry: Owns ColoringSession objects keyed by activity id
"""

import logging
from typing import Any, Dict, List, Optional

from CB_Libs.SessionLib.coloring_session import ColoringSession
from CB_Libs.SessionLib.session_config import ColoringConfig

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Registry of active coloring sessions.

    Example:
        >>> registry = SessionRegistry()
        >>> session = registry.open_session("page-7", background="pages/7.png")
        >>> registry.has_session("page-7")
        True
        >>> registry.close_session("page-7")
        True
    """

    def __init__(self, default_config: Optional[ColoringConfig] = None):
        """
        Args:
            default_config: Settings for sessions opened without a config
        """
        self.default_config = default_config
        self._sessions: Dict[str, ColoringSession] = {}

    def open_session(
        self,
        activity_id: str,
        background: Optional[Any] = None,
        config: Optional[ColoringConfig] = None,
    ) -> ColoringSession:
        """
        Open (or return the already open) session for an activity.

        Args:
            activity_id: Host identifier of the activity
            background: Optional background source loaded into a new session
            config: Settings for a new session; the registry default otherwise

        Returns:
            The session for activity_id

        Raises:
            ValueError: If activity_id is empty
        """
        activity_id = str(activity_id).strip()
        if not activity_id:
            raise ValueError("activity_id cannot be empty")

        existing = self._sessions.get(activity_id)
        if existing is not None:
            logger.debug(f"Session for activity '{activity_id}' already open")
            return existing

        session = ColoringSession(activity_id, config or self.default_config)
        if background is not None:
            session.load_background(background)

        self._sessions[activity_id] = session
        logger.info(f"Opened session for activity '{activity_id}'")
        return session

    def get_session(self, activity_id: str) -> ColoringSession:
        """
        Get the open session for an activity.

        Raises:
            KeyError: If no session is open for activity_id
        """
        activity_id = str(activity_id).strip()
        if activity_id not in self._sessions:
            available = ", ".join(self.list_activity_ids())
            raise KeyError(
                f"No session open for activity '{activity_id}'. "
                f"Open activities: {available}"
            )
        return self._sessions[activity_id]

    def has_session(self, activity_id: str) -> bool:
        return str(activity_id).strip() in self._sessions

    def close_session(self, activity_id: str) -> bool:
        """
        Close and forget the session for an activity.

        Returns:
            True if a session was closed, False if none was open
        """
        session = self._sessions.pop(str(activity_id).strip(), None)
        if session is None:
            return False
        session.close()
        return True

    def close_all(self) -> int:
        """Close every open session. Returns the number closed."""
        activity_ids = self.list_activity_ids()
        for activity_id in activity_ids:
            self.close_session(activity_id)
        return len(activity_ids)

    def list_activity_ids(self) -> List[str]:
        return sorted(self._sessions.keys())

    def __len__(self) -> int:
        return len(self._sessions)
