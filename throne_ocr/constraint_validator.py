"""
Plausibility validation for recognized player statistics.
Flags suspicious values without removing or correcting records.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from throne_ocr.models import UNKNOWN_CLASS, PlayerRecord

TANK = 'tank'
HEALER = 'healer'

SCOPE_ALL = 'all'
SCOPE_NON_SUPPORT = 'non_support'
SCOPE_HEALER = 'healer'


@dataclass(frozen=True)
class StatFlag:
    """One rule a player's statistics tripped."""

    stat: str
    scope: str
    value: int
    message: str


@dataclass
class ValidationReport:
    """Outcome of validating a record set."""

    flags: Dict[str, List[StatFlag]] = field(default_factory=dict)
    flagged_players: List[PlayerRecord] = field(default_factory=list)
    unknown_class_players: List[PlayerRecord] = field(default_factory=list)
    validated_count: int = 0

    @property
    def warning_count(self) -> int:
        return sum(len(flags) for flags in self.flags.values())


class PlayerStatValidator:
    """Validates player statistics against universal and class-specific bounds."""

    # Universal bounds
    KILLS_MAX = 200
    ASSISTS_MIN = 5
    ASSISTS_MAX = 150
    DAMAGE_DONE_MIN = 10_000
    DAMAGE_DONE_MAX = 8_000_000
    DAMAGE_RECEIVED_MIN = 200_000
    DAMAGE_RECEIVED_MAX = 3_000_000

    # Classes other than tank and healer
    NON_SUPPORT_ASSISTS_MIN = 20
    NON_SUPPORT_KILLS_MIN = 10
    NON_SUPPORT_DAMAGE_DONE_MIN = 500_000
    NON_SUPPORT_DAMAGE_RECEIVED_MIN = 300_000

    # Healers
    HEALER_ASSISTS_MIN = 20
    HEALER_HEALING_MIN = 800_000
    HEALER_HEALING_MAX = 5_000_000

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize validator.

        Args:
            logger: Logger instance
        """
        self.logger = logger

    def check_universal(self, player: PlayerRecord) -> List[StatFlag]:
        """
        Apply the rules every class is held to.

        Args:
            player: Record to check

        Returns:
            Flags raised, in rule order
        """
        flags = []
        name = player.name

        if player.kills > self.KILLS_MAX:
            flags.append(StatFlag(
                'kills', SCOPE_ALL, player.kills,
                f"SUSPICIOUS KILLS: {name} has {player.kills} kills (>{self.KILLS_MAX})"
            ))

        if player.assists < self.ASSISTS_MIN or player.assists > self.ASSISTS_MAX:
            flags.append(StatFlag(
                'assists', SCOPE_ALL, player.assists,
                f"SUSPICIOUS ASSISTS: {name} has {player.assists} assists "
                f"(should be {self.ASSISTS_MIN}-{self.ASSISTS_MAX})"
            ))

        if player.damage_done < self.DAMAGE_DONE_MIN or player.damage_done > self.DAMAGE_DONE_MAX:
            flags.append(StatFlag(
                'damage_done', SCOPE_ALL, player.damage_done,
                f"SUSPICIOUS DAMAGE DONE: {name} has {player.damage_done} damage done "
                f"(should be {self.DAMAGE_DONE_MIN:,}-{self.DAMAGE_DONE_MAX:,})"
            ))

        if (player.damage_received < self.DAMAGE_RECEIVED_MIN
                or player.damage_received > self.DAMAGE_RECEIVED_MAX):
            flags.append(StatFlag(
                'damage_received', SCOPE_ALL, player.damage_received,
                f"SUSPICIOUS DAMAGE RECEIVED: {name} has {player.damage_received} damage received "
                f"(should be {self.DAMAGE_RECEIVED_MIN:,}-{self.DAMAGE_RECEIVED_MAX:,})"
            ))

        if player.healing == 0:
            flags.append(StatFlag(
                'healing', SCOPE_ALL, player.healing,
                f"SUSPICIOUS HEALING: {name} has 0 healing"
            ))

        return flags

    def check_non_support(self, player: PlayerRecord) -> List[StatFlag]:
        """Tighter bounds for damage dealers (any class but tank or healer)."""
        flags = []
        label = f"{player.name} ({player.player_class})"

        if player.assists < self.NON_SUPPORT_ASSISTS_MIN:
            flags.append(StatFlag(
                'assists', SCOPE_NON_SUPPORT, player.assists,
                f"SUSPICIOUS ASSISTS (Non-Tank/Healer): {label} has {player.assists} assists "
                f"(<{self.NON_SUPPORT_ASSISTS_MIN})"
            ))

        if player.kills < self.NON_SUPPORT_KILLS_MIN:
            flags.append(StatFlag(
                'kills', SCOPE_NON_SUPPORT, player.kills,
                f"SUSPICIOUS KILLS (Non-Tank/Healer): {label} has {player.kills} kills "
                f"(<{self.NON_SUPPORT_KILLS_MIN})"
            ))

        if player.damage_done < self.NON_SUPPORT_DAMAGE_DONE_MIN:
            flags.append(StatFlag(
                'damage_done', SCOPE_NON_SUPPORT, player.damage_done,
                f"SUSPICIOUS DAMAGE DONE (Non-Tank/Healer): {label} has {player.damage_done} damage done "
                f"(<{self.NON_SUPPORT_DAMAGE_DONE_MIN:,})"
            ))

        if player.damage_received < self.NON_SUPPORT_DAMAGE_RECEIVED_MIN:
            flags.append(StatFlag(
                'damage_received', SCOPE_NON_SUPPORT, player.damage_received,
                f"SUSPICIOUS DAMAGE RECEIVED (Non-Tank/Healer): {label} has {player.damage_received} "
                f"damage received (<{self.NON_SUPPORT_DAMAGE_RECEIVED_MIN:,})"
            ))

        return flags

    def check_healer(self, player: PlayerRecord) -> List[StatFlag]:
        """Bounds specific to healers."""
        flags = []

        if player.assists < self.HEALER_ASSISTS_MIN:
            flags.append(StatFlag(
                'assists', SCOPE_HEALER, player.assists,
                f"SUSPICIOUS ASSISTS (Healer): {player.name} has {player.assists} assists "
                f"(<{self.HEALER_ASSISTS_MIN})"
            ))

        if player.healing < self.HEALER_HEALING_MIN or player.healing > self.HEALER_HEALING_MAX:
            flags.append(StatFlag(
                'healing', SCOPE_HEALER, player.healing,
                f"SUSPICIOUS HEALING (Healer): {player.name} has {player.healing} healing "
                f"(should be {self.HEALER_HEALING_MIN:,}-{self.HEALER_HEALING_MAX:,})"
            ))

        return flags

    def check_player(self, player: PlayerRecord) -> List[StatFlag]:
        """
        Apply every rule that holds for the player's class.

        Tanks are only held to the universal rules.

        Args:
            player: Record with a resolved class

        Returns:
            All flags raised, universal rules first
        """
        flags = self.check_universal(player)

        player_class = player.player_class.lower()
        if player_class == HEALER:
            flags.extend(self.check_healer(player))
        elif player_class != TANK:
            flags.extend(self.check_non_support(player))

        return flags

    def validate_players(self, players: List[PlayerRecord]) -> ValidationReport:
        """
        Validate a final record set.

        UNKNOWN-class players are not validated; they are collected for the
        diagnostics file instead. Every flag is logged as a warning.

        Args:
            players: Deduplicated, class-resolved records

        Returns:
            ValidationReport
        """
        report = ValidationReport()

        for player in players:
            if not player.has_known_class:
                report.unknown_class_players.append(player)
                continue

            flags = self.check_player(player)
            report.validated_count += 1
            if not flags:
                continue

            report.flags[player.name] = flags
            report.flagged_players.append(player)
            if self.logger:
                for flag in flags:
                    self.logger.warning(flag.message)

        if self.logger:
            self.logger.info(
                f"Player validation complete: {report.validated_count} players validated, "
                f"{report.warning_count} warnings logged, {len(report.flagged_players)} flagged, "
                f"{len(report.unknown_class_players)} with {UNKNOWN_CLASS} class"
            )
        return report
