# src/tasktrack/auth.py

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class SettingsAuthProvider:
    """
    AuthProvider backed by configuration (TASKTRACK_OWNER_ID).

    A local single-user install has no login flow: the owner is whoever the
    settings say. An empty value means "not signed in".
    """

    def __init__(self, settings) -> None:
        self._settings = settings

    async def current_owner(self) -> str | None:
        owner = str(getattr(self._settings, "owner_id", None) or "").strip()
        if not owner:
            logger.info("No owner configured (not authenticated).")
            return None
        return owner
