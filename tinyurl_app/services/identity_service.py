"""
Identity store: account records and credential checks.
"""

import logging
import threading
import uuid
from typing import Dict

import bcrypt

from tinyurl_app.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    InvalidInputError,
    NotFoundError,
)
from tinyurl_app.models.account import Account

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72


class IdentityStore:
    """
    In-memory account store.

    Accounts are keyed by id, with a secondary index from email to id so that
    registration and login do not scan every account. Emails compare
    case-sensitively.

    One lock guards both tables, so two concurrent registrations of the same
    email cannot both succeed.
    """

    def __init__(self, bcrypt_rounds: int = 12):
        """
        Args:
            bcrypt_rounds: bcrypt cost factor (log2 of the work factor)
        """
        self.bcrypt_rounds = bcrypt_rounds
        self._accounts: Dict[str, Account] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._lock = threading.Lock()
        # Checked against when the email is unknown, so both failure paths of
        # authenticate() do the same amount of work.
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=bcrypt_rounds))

    def register(self, email: str, password: str) -> Account:
        """
        Create a new account.

        Raises:
            InvalidInputError: email or password empty, or password too long
            DuplicateEmailError: email already registered
        """
        if not email or not password:
            raise InvalidInputError("Please fill in both email and password to sign up")

        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            raise InvalidInputError(
                f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes"
            )

        # Hash outside the lock: bcrypt is slow on purpose
        credential_hash = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=self.bcrypt_rounds))

        with self._lock:
            if email in self._ids_by_email:
                raise DuplicateEmailError()

            account = Account(
                id=uuid.uuid4().hex,
                email=email,
                credential_hash=credential_hash.decode("utf-8"),
            )
            self._accounts[account.id] = account
            self._ids_by_email[email] = account.id

        logger.info("Registered account %s", account.id)
        return account.model_copy()

    def authenticate(self, email: str, password: str) -> Account:
        """
        Check credentials and return the matching account.

        Unknown email and wrong password raise the same error with the same
        message, and both run one bcrypt check.

        Raises:
            InvalidCredentialsError: no such email, or wrong password
        """
        with self._lock:
            account_id = self._ids_by_email.get(email or "")
            account = self._accounts.get(account_id) if account_id else None

        password_bytes = (password or "").encode("utf-8")

        # Registration never accepts longer passwords, so these cannot match
        if account is None or len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            bcrypt.checkpw(password_bytes[:BCRYPT_MAX_PASSWORD_BYTES], self._dummy_hash)
            logger.debug("Login rejected")
            raise InvalidCredentialsError()

        if not bcrypt.checkpw(password_bytes, account.credential_hash.encode("utf-8")):
            logger.debug("Login rejected")
            raise InvalidCredentialsError()

        return account.model_copy()

    def get_account(self, account_id: str) -> Account:
        """
        Look up an account by id.

        Raises:
            NotFoundError: no such account
        """
        with self._lock:
            account = self._accounts.get(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account.model_copy()
