"""
Session manager: binds signed, client-held tokens to account ids.
"""

import logging
import secrets
import threading
import time
from typing import Dict, Optional, Tuple

from itsdangerous import BadData, URLSafeTimedSerializer

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Issues and resolves session tokens.

    A token is an itsdangerous-signed payload holding a random session id and
    the account id. The signature makes it tamper-evident; the table of live
    session ids makes it revocable, so end() really logs the token out.

    Tokens carry no expiry unless max_age (seconds) is set. With max_age set,
    entries older than max_age are pruned whenever a new session starts.
    """

    SALT = "tinyurl-session"

    def __init__(self, secret_key: str, max_age: Optional[int] = None):
        self.serializer = URLSafeTimedSerializer(secret_key, salt=self.SALT)
        self.max_age = max_age
        # session id -> (account id, issued at)
        self._sessions: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def start(self, account_id: str) -> str:
        """Open a session for account_id and return its token"""
        session_id = secrets.token_urlsafe(32)
        now = time.time()
        with self._lock:
            self._prune_expired(now)
            self._sessions[session_id] = (account_id, now)
        logger.info("Session started for account %s", account_id)
        return self.serializer.dumps({"sid": session_id, "account_id": account_id})

    def resolve(self, token: Optional[str]) -> Optional[str]:
        """
        Return the account bound to token, or None.

        None covers every anonymous case: no token, bad signature, expired,
        malformed payload, or a session that was ended. Never raises.
        """
        payload = self._load(token, max_age=self.max_age)
        if payload is None:
            return None

        with self._lock:
            entry = self._sessions.get(payload["sid"])

        if entry is None or entry[0] != payload["account_id"]:
            return None
        return entry[0]

    def end(self, token: Optional[str]) -> None:
        """
        Revoke the session behind token. Unknown tokens are ignored.

        Expired tokens are still revoked: only the signature is checked here.
        """
        payload = self._load(token, max_age=None)
        if payload is None:
            return

        with self._lock:
            entry = self._sessions.pop(payload["sid"], None)

        if entry is not None:
            logger.info("Session ended for account %s", entry[0])

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _prune_expired(self, now: float) -> None:
        """Drop entries older than max_age. Caller holds the lock."""
        if self.max_age is None:
            return
        expired = [
            session_id for session_id, (_, issued_at) in self._sessions.items()
            if now - issued_at > self.max_age
        ]
        for session_id in expired:
            del self._sessions[session_id]

    def _load(self, token: Optional[str], max_age: Optional[int]) -> Optional[dict]:
        if not token:
            return None
        try:
            payload = self.serializer.loads(token, max_age=max_age)
        except BadData:
            return None
        if not isinstance(payload, dict):
            return None
        if not isinstance(payload.get("sid"), str) or not isinstance(payload.get("account_id"), str):
            return None
        return payload
