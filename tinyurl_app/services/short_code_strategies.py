"""
Short code generation strategies for URL shortener.
Uses Strategy Pattern to allow different generation algorithms.
"""

import secrets
import string
from abc import ABC, abstractmethod
from typing import Callable, Optional

from tinyurl_app.exceptions import CapacityExceededError


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    @property
    def capacity(self) -> Optional[int]:
        """Number of distinct codes this strategy can produce (None if unbounded)"""
        return None

    @abstractmethod
    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """
        Generate a short code.

        Args:
            is_taken: Predicate telling whether a candidate code is already live

        Returns:
            A short code for which is_taken() returned False

        Raises:
            CapacityExceededError: If no free code could be found
        """
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Random generation strategy.
    Draws a fixed-length string from [0-9a-zA-Z] and checks it against the
    live codes, retrying on collision.

    The random source is `secrets`, so codes cannot be predicted from
    previously issued ones.
    """

    ALPHABET = string.digits + string.ascii_lowercase + string.ascii_uppercase

    def __init__(self, length: int = 6, max_retries: int = 10):
        if length < 1:
            raise ValueError("length must be positive")
        self.length = length
        self.max_retries = max_retries

    @property
    def capacity(self) -> int:
        """Number of distinct codes this strategy can produce"""
        return len(self.ALPHABET) ** self.length

    def generate(self, is_taken: Callable[[str], bool]) -> str:
        """Generate random short code with collision checking"""
        for attempt in range(self.max_retries):
            short_code = self._generate_random_string()

            if not is_taken(short_code):
                return short_code

        raise CapacityExceededError(
            f"Could not generate unique short code after {self.max_retries} attempts"
        )

    def _generate_random_string(self) -> str:
        """Generate a random string of specified length"""
        return ''.join(secrets.choice(self.ALPHABET) for _ in range(self.length))
