"""
Identifier generation for preset documents.

Lightroom expects a 32-character uppercase hex sync id on every correction
and mask, and an RFC 4122 version 4 UUID on the preset itself. Values only
need to be unique, so the random source is injectable for reproducible output.
"""

import random
import uuid
from typing import Optional


class IdGenerator:
    """Produces sync ids and preset UUIDs from a random source."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.SystemRandom()

    @classmethod
    def seeded(cls, seed: int) -> 'IdGenerator':
        """Deterministic generator, for tests and reproducible exports."""
        return cls(random.Random(seed))

    def sync_id(self) -> str:
        """32 uppercase hex characters."""
        return '%032X' % self.rng.getrandbits(128)

    def preset_uuid(self) -> str:
        """36-character uppercase UUID with version 4 and RFC 4122 variant bits."""
        return str(uuid.UUID(int=self.rng.getrandbits(128), version=4)).upper()
