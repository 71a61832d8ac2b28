"""
Mapping store: short code -> long URL mappings with per-account ownership.
"""

import logging
import threading
from typing import Dict, List, Optional, Set

from tinyurl_app.exceptions import (
    CapacityExceededError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from tinyurl_app.models.mapping import Mapping
from tinyurl_app.services.short_code_strategies import (
    RandomShortCodeStrategy,
    ShortCodeStrategy,
)

logger = logging.getLogger(__name__)


class MappingStore:
    """
    In-memory mapping store with an ownership index.

    Access rules:
    - resolve_public() is open to everyone (the redirect path).
    - get/update/delete check, in order: the code is live (NotFound), the
      requester is logged in (Unauthorized), the requester owns it (Forbidden).
    - create/list_owned require a logged-in requester.

    The mapping table and the ownership index change together under one
    lock, so an account owns a code iff that code's mapping is live.
    """

    def __init__(self, short_code_strategy: Optional[ShortCodeStrategy] = None):
        """
        Args:
            short_code_strategy: Code generator (random 6-char codes by default)
        """
        self.short_code_strategy = short_code_strategy or RandomShortCodeStrategy()
        self._mappings: Dict[str, Mapping] = {}
        self._owned: Dict[str, Set[str]] = {}  # account id -> codes
        self._lock = threading.RLock()

    def create(self, owner_id: Optional[str], long_url: str) -> Mapping:
        """
        Create a mapping owned by owner_id under a fresh random code.

        Raises:
            UnauthorizedError: owner_id is None
            InvalidInputError: long_url is empty
            CapacityExceededError: no free code could be found
        """
        if owner_id is None:
            raise UnauthorizedError("Must be logged in to create a new URL")
        if not long_url:
            raise InvalidInputError("long_url is required")

        with self._lock:
            capacity = self.short_code_strategy.capacity
            if capacity is not None and len(self._mappings) >= capacity:
                raise CapacityExceededError("Short code space is exhausted")

            code = self.short_code_strategy.generate(self._is_live)
            mapping = Mapping(code=code, long_url=long_url, owner_id=owner_id)
            self._mappings[code] = mapping
            self._owned.setdefault(owner_id, set()).add(code)

        logger.info("Created %s for account %s", code, owner_id)
        return mapping.model_copy()

    def resolve_public(self, code: str) -> str:
        """
        Return the long URL for code, with no ownership check.

        Raises:
            NotFoundError: code is not live
        """
        with self._lock:
            mapping = self._mappings.get(code)
        if mapping is None:
            raise NotFoundError("This short URL doesn't exist")
        return mapping.long_url

    def get(self, code: str, requester_id: Optional[str]) -> Mapping:
        """Return the mapping if requester_id owns it (see class docstring)"""
        with self._lock:
            return self._authorize(code, requester_id, "see this URL").model_copy()

    def update(self, code: str, requester_id: Optional[str], new_long_url: str) -> Mapping:
        """
        Point an owned code at a new long URL. Ownership is unchanged.

        Raises:
            NotFoundError, UnauthorizedError, ForbiddenError: see class docstring
            InvalidInputError: new_long_url is empty
        """
        with self._lock:
            mapping = self._authorize(code, requester_id, "update this URL")
            if not new_long_url:
                raise InvalidInputError("long_url is required")
            mapping.long_url = new_long_url
            updated = mapping.model_copy()

        logger.info("Updated %s", code)
        return updated

    def delete(self, code: str, requester_id: Optional[str]) -> None:
        """
        Remove an owned mapping and drop it from the owner's codes.

        Raises:
            NotFoundError, UnauthorizedError, ForbiddenError: see class docstring
        """
        with self._lock:
            self._authorize(code, requester_id, "delete this URL")
            del self._mappings[code]
            owned = self._owned[requester_id]
            owned.discard(code)
            if not owned:
                del self._owned[requester_id]

        logger.info("Deleted %s", code)

    def list_owned(self, requester_id: Optional[str]) -> List[Mapping]:
        """
        All live mappings owned by requester_id, sorted by code.

        Raises:
            UnauthorizedError: requester_id is None
        """
        if requester_id is None:
            raise UnauthorizedError("Must be logged in to see your URLs")

        with self._lock:
            mappings = []
            for code in sorted(self._owned.get(requester_id, ())):
                mapping = self._mappings.get(code)
                assert mapping is not None, f"owned code {code} has no mapping"
                mappings.append(mapping.model_copy())
        return mappings

    def owned_codes(self, account_id: str) -> Set[str]:
        """Snapshot of the codes account_id currently owns"""
        with self._lock:
            return set(self._owned.get(account_id, ()))

    def __len__(self) -> int:
        with self._lock:
            return len(self._mappings)

    def _is_live(self, code: str) -> bool:
        return code in self._mappings

    def _authorize(self, code: str, requester_id: Optional[str], action: str) -> Mapping:
        """Apply the NotFound > Unauthorized > Forbidden ladder. Caller holds the lock."""
        mapping = self._mappings.get(code)
        if mapping is None:
            raise NotFoundError("The short URL you're looking for doesn't exist")
        if requester_id is None:
            raise UnauthorizedError(f"Must be logged in to {action}")
        if code not in self._owned.get(requester_id, ()):
            logger.debug("Account %s denied access to %s", requester_id, code)
            raise ForbiddenError()
        assert mapping.owner_id == requester_id, f"ownership index out of sync for {code}"
        return mapping
