"""
Player record shared by the recognition, validation and output stages.
"""

from dataclasses import dataclass
from typing import List

UNKNOWN_CLASS = 'UNKNOWN'
SUITS = 'Suits'
DEFAULT_ENEMY_LABEL = 'Enemy'


@dataclass
class PlayerRecord:
    """One leaderboard row, keyed by its resolved name."""

    name: str
    team: str
    date: str
    kills: int
    assists: int
    damage_done: int
    damage_received: int
    healing: int
    player_class: str = UNKNOWN_CLASS
    valid: bool = True

    @property
    def has_known_class(self) -> bool:
        return self.player_class.lower() != UNKNOWN_CLASS.lower()

    def to_row(self) -> List[str]:
        """Return the record as main-output columns."""
        return [
            self.date,
            self.team,
            self.name,
            self.player_class,
            str(self.kills),
            str(self.assists),
            str(self.damage_done),
            str(self.damage_received),
            str(self.healing),
        ]

    def __str__(self) -> str:
        return self.name
