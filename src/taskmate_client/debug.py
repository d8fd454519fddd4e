from __future__ import annotations

import logging
from dataclasses import dataclass

from .storage import KeyValueStore

DEBUG_AUTH_KEY = "DEBUG_AUTH"

logger = logging.getLogger("taskmate_client.auth.debug")


@dataclass
class AuthDebug:
    """Verbose session-lifecycle logging, toggled at runtime.

    The flag lives in the key-value store rather than in config so it can be
    switched on for a running installation: ``storage.set("DEBUG_AUTH", "true")``.
    """

    storage: KeyValueStore | None = None

    def enabled(self) -> bool:
        if self.storage is None:
            return False
        try:
            return (self.storage.get(DEBUG_AUTH_KEY) or "").strip().lower() == "true"
        except OSError:
            return False

    def log(self, message: str, **fields: object) -> None:
        if self.enabled():
            logger.info("[AUTH DEBUG] %s", message, extra={"debug_fields": fields})

    def warn(self, message: str, **fields: object) -> None:
        if self.enabled():
            logger.warning("[AUTH DEBUG] %s", message, extra={"debug_fields": fields})
