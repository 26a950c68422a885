"""Shared setup for synthetic traffic generators."""

from __future__ import annotations

import random
from abc import ABC

from faker import Faker


class BaseGenerator(ABC):
    """Owns the Faker instance used to fabricate accounts and devices.

    A seed makes both Faker and the module-level ``random`` generator
    deterministic, so simulated traffic replays identically.

    Parameters
    ----------
    seed : int | None
        Seed for Faker and ``random``; unseeded when None.
    locale : str
        Faker locale; ``pt_BR`` provides CPF numbers and state codes.
    """

    def __init__(self, seed: int | None = None, locale: str = "pt_BR") -> None:
        self.seed = seed
        self.fake = Faker(locale)
        if seed is not None:
            self.fake.seed_instance(seed)
            random.seed(seed)
