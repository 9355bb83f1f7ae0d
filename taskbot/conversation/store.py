"""In-memory session store keyed by user id."""

import logging

from taskbot.model.session import Session

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds one wizard ``Session`` per user.

    Sessions live for the life of the process; an in-flight wizard is lost
    on restart.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get_or_create(self, user_id: str, session_key: str) -> Session:
        """Fetch the user's session, creating it lazily.

        ``session_key`` is refreshed on every call so replies follow the user
        to whichever chat they last wrote from.
        """
        session = self._sessions.get(user_id)
        if session is None:
            session = Session(user_id=user_id, session_key=session_key)
            self._sessions[user_id] = session
            logger.debug(f"Created session for user {user_id}")
        else:
            session.session_key = session_key
        return session

    def get(self, user_id: str) -> Session | None:
        return self._sessions.get(user_id)

    def __len__(self) -> int:
        return len(self._sessions)
