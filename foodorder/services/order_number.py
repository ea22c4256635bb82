"""
Human-readable order numbers
"""

import secrets
import string
import time
from typing import Callable, Optional

from foodorder import config

class OrderNumberGenerator:
    """Builds ``<prefix>-<epoch millis>-<random suffix>`` identifiers.

    Needs no shared counter; the unique index on ``orders.order_number``
    catches the rare collision.
    """

    ALPHABET = string.ascii_uppercase + string.digits

    def __init__(
        self,
        prefix: Optional[str] = None,
        suffix_length: int = 5,
        clock: Callable[[], float] = time.time
    ):
        self.prefix = prefix or config.ORDER_NUMBER_PREFIX
        self.suffix_length = suffix_length
        self.clock = clock

    def generate(self) -> str:
        millis = int(self.clock() * 1000)
        suffix = "".join(secrets.choice(self.ALPHABET) for _ in range(self.suffix_length))
        return f"{self.prefix}-{millis}-{suffix}"
