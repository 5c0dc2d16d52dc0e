# /// script
# requires-python = ">=3.12"
# dependencies = []
# ///
"""Seeded play generator.

Two 31-bit linear congruential generators advanced in lockstep and combined
by XOR. The seeds are derived from free text typed at the console (the date
and the time), so the same answers replay the same game. This is not a
source of cryptographic randomness.

Usage::

    rng = DualLCG.seeded("7/4/61", "1300")
    roll = rng.next_int(1, 1000)
"""

from __future__ import annotations

SEED1_START = 0x12345678
SEED2_START = 0x87654321

_MASK32 = 0xFFFFFFFF
_MASK31 = 0x7FFFFFFF


class InvalidRangeError(ValueError):
    """Raised when a draw is requested with max < min."""


class DualLCG:
    """Random engine owned by one game. Every draw mutates the state."""

    def __init__(self, seed1: int = SEED1_START, seed2: int = SEED2_START):
        self.seed1 = seed1 & _MASK32
        self.seed2 = seed2 & _MASK32

    @classmethod
    def seeded(cls, date_text: str, time_text: str) -> DualLCG:
        rng = cls()
        rng.seed(date_text, time_text)
        return rng

    @classmethod
    def from_state(cls, state: tuple[int, int]) -> DualLCG:
        return cls(*state)

    @property
    def state(self) -> tuple[int, int]:
        return (self.seed1, self.seed2)

    def seed(self, date_text: str, time_text: str) -> None:
        """Reset both accumulators and stir in the date and time text."""
        seed1 = SEED1_START
        for ch in date_text:
            seed1 = (seed1 * 31 + ord(ch)) & _MASK32
        seed2 = SEED2_START
        for ch in time_text:
            seed2 = (seed2 * 37 + ord(ch)) & _MASK32
        self.seed1 = seed1
        self.seed2 = seed2

    def mix_selection(self, batting_avg: int, roster_index: int, year: int, hand: str) -> None:
        """Fold a hand-picked player into the state.

        Called once per visiting selection so that the opposing lineup and
        the game depend on who was chosen as well as the seed text.
        """
        self.seed1 = (self.seed1 ^ (batting_avg * 31 + roster_index)) & _MASK32
        self.seed2 = (self.seed2 ^ (year * 37 + ord(hand))) & _MASK32

    def next_int(self, low: int, high: int) -> int:
        """Return an integer in [low, high], both ends inclusive."""
        if high < low:
            raise InvalidRangeError(f"next_int({low}, {high}): max is below min")
        self.seed1 = (self.seed1 * 1103515245 + 12345) & _MASK31
        self.seed2 = (self.seed2 * 69069 + 1) & _MASK31
        combined = self.seed1 ^ self.seed2
        return low + combined % (high - low + 1)

    def __repr__(self) -> str:
        return f"DualLCG(seed1={self.seed1:#010x}, seed2={self.seed2:#010x})"
