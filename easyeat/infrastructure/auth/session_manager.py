"""
Current-session accessor

Holds whatever the external identity provider reported as the signed-in
user. Stores read it synchronously through current_session().
"""

import logging
from typing import Optional

from easyeat.domain.value_objects.user_session import UserSession


class SessionManager:
    """Tracks the signed-in user for this process"""

    def __init__(self, session: Optional[UserSession] = None):
        self._session = session
        self._logger = logging.getLogger(self.__class__.__name__)

    def current_session(self) -> Optional[UserSession]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def sign_in(self, session: UserSession) -> None:
        self._logger.info("🔐 SIGN IN: %s (%s)", session.user_id, session.role.value)
        self._session = session

    def sign_out(self) -> None:
        if self._session is not None:
            self._logger.info("🚪 SIGN OUT: %s", self._session.user_id)
        self._session = None
