"""Base generator class for all data generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker

PRINCIPAL_LETTERS = "ABCDEFGHJKMNPQRSTVWXYZ"


class BaseGenerator(ABC):
    """Base class for all data generators.

    Provides Faker instance creation and seed-based reproducibility.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)

    def principal(self) -> str:
        """Generate a Stacks-style principal (e.g. ``ST3K9Q...``)."""
        return self.fake.bothify("ST#?#?#?#?#?#?#?#?#?", letters=PRINCIPAL_LETTERS)
