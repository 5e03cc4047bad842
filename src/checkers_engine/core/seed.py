"""Per-game random streams for the computer opponent.

A session seed is stretched into one seed per game with HMAC-SHA256, so
game N of a seeded session replays identically no matter how many
moves the earlier games took or whether they were abandoned.
"""

import hashlib
import hmac
import random


class SeedManager:
    def __init__(self, session_seed: int):
        self._session_seed = session_seed

    @property
    def session_seed(self) -> int:
        return self._session_seed

    def get_game_seed(self, game_number: int) -> int:
        """Seed for the *game_number*-th game (1-based) of this session."""
        key = self._session_seed.to_bytes(8, byteorder="big", signed=True)
        digest = hmac.new(key, f"game:{game_number}".encode(), hashlib.sha256).digest()
        return int.from_bytes(digest[:8], byteorder="big")

    def get_rng(self, game_seed: int) -> random.Random:
        """Private Random; the module-level generator is never touched."""
        return random.Random(game_seed)

    def rng_for_game(self, game_number: int) -> random.Random:
        return self.get_rng(self.get_game_seed(game_number))
