"""
Scoreboard recognition: turns aggregated OCR text into player records.
Builds records from parsed lines, deduplicates them by name, attaches classes
and orders them for output.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from throne_ocr.class_registry import ClassRegistry
from throne_ocr.line_parser import ParsedLine, lightly_clean, parse_line
from throne_ocr.models import DEFAULT_ENEMY_LABEL, PlayerRecord
from throne_ocr.name_resolver import NameResolver
from throne_ocr.numeric_cleaner import parse_numeric_value
from throne_ocr.team_assigner import assign_team, normalize_filter_color

KEEP_FIRST = 'keep_first'
KEEP_LAST = 'keep_last'
DUPLICATE_POLICIES = (KEEP_FIRST, KEEP_LAST)


@dataclass
class RecognitionResult:
    """Everything one recognition pass produced."""

    players: List[PlayerRecord] = field(default_factory=list)
    error_lines: List[str] = field(default_factory=list)
    discarded_lines: int = 0
    duplicate_lines: int = 0


class RecordBuilder:
    """Builds a PlayerRecord from a parsed line."""

    def __init__(
        self,
        filter_color: str,
        date_str: str,
        enemy_label: str = DEFAULT_ENEMY_LABEL,
        name_resolver: Optional[NameResolver] = None
    ):
        """
        Initialize builder for one batch.

        Args:
            filter_color: Operator's color ('y'/'yellow' or 'r'/'red'); rows of this color are Suits
            date_str: Timestamp attached to every record of the batch
            enemy_label: Team label for rows of the other color
            name_resolver: Resolver for raw name cells (defaults to built-in aliases)

        Raises:
            ValueError: If filter_color is not supported
        """
        self.filter_color = normalize_filter_color(filter_color)
        self.date_str = date_str
        self.enemy_label = enemy_label or DEFAULT_ENEMY_LABEL
        self.name_resolver = name_resolver or NameResolver()

    def resolve_name(self, parsed: ParsedLine) -> str:
        return self.name_resolver.resolve(parsed.name_cell)

    def build(self, parsed: ParsedLine, name: Optional[str] = None) -> PlayerRecord:
        """
        Build a record from a valid parsed line.

        Args:
            parsed: Line with exactly five numeric cells
            name: Already-resolved name (resolved from the line when omitted)

        Returns:
            PlayerRecord with class still UNKNOWN

        Raises:
            ValueError: If the line does not carry exactly five numeric cells
        """
        if not parsed.valid:
            raise ValueError(
                f"Expected 5 numeric cells, got {len(parsed.numeric_cells)}: {parsed.raw!r}"
            )

        kills, assists, damage_done, damage_received, healing = (
            parse_numeric_value(cell) for cell in parsed.numeric_cells
        )
        return PlayerRecord(
            name=name if name is not None else self.resolve_name(parsed),
            team=assign_team(parsed.color_cell, self.filter_color, self.enemy_label),
            date=self.date_str,
            kills=kills,
            assists=assists,
            damage_done=damage_done,
            damage_received=damage_received,
            healing=healing,
        )


class ScoreboardRecognizer:
    """Runs the line-by-line recognition pipeline over aggregated OCR text."""

    def __init__(
        self,
        builder: RecordBuilder,
        class_registry: ClassRegistry,
        duplicate_policy: str = KEEP_FIRST,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize recognizer.

        Args:
            builder: Record builder for the batch
            class_registry: Registry used to attach player classes
            duplicate_policy: 'keep_first' or 'keep_last' for repeated names
            logger: Logger instance

        Raises:
            ValueError: If duplicate_policy is not supported
        """
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Unsupported duplicate policy: {duplicate_policy}. Must be one of {list(DUPLICATE_POLICIES)}"
            )

        self.builder = builder
        self.class_registry = class_registry
        self.duplicate_policy = duplicate_policy
        self.logger = logger

    def recognize(self, ocr_text: Optional[str]) -> RecognitionResult:
        """
        Extract player records from OCR text.

        Lines without a color token, with the color token in the first cell,
        or whose name cleans down to nothing are discarded. Lines with a name
        but not exactly five numeric cells go to the error lines in lightly
        cleaned form. Every call starts from an empty result.

        Args:
            ocr_text: Newline-separated, pipe-delimited OCR output

        Returns:
            RecognitionResult with players sorted by kills, descending
        """
        result = RecognitionResult()
        if ocr_text is None or not ocr_text.strip():
            return result

        players: Dict[str, PlayerRecord] = {}

        for line in ocr_text.splitlines():
            parsed = parse_line(line)
            if parsed is None:
                if line.strip():
                    result.discarded_lines += 1
                    if self.logger:
                        self.logger.debug(f"Discarded line without usable color cell: {line.strip()}")
                continue

            name = self.builder.resolve_name(parsed)
            if not name:
                result.discarded_lines += 1
                if self.logger:
                    self.logger.debug(f"Discarded line with empty player name: {line.strip()}")
                continue

            if not parsed.valid:
                result.error_lines.append(lightly_clean(line))
                if self.logger:
                    self.logger.warning(
                        f"MANUAL PROCESSING NEEDED - Player '{name}' has "
                        f"{len(parsed.numeric_cells)} numeric columns instead of 5: {list(parsed.numeric_cells)}"
                    )
                continue

            player = self.builder.build(parsed, name=name)
            self._merge(players, player, result)

        for player in players.values():
            player.player_class = self.class_registry.resolve(player.name)

        # sorted() is stable with reverse=True, so ties keep insertion order
        result.players = sorted(players.values(), key=lambda p: p.kills, reverse=True)

        if self.logger:
            self.logger.info(
                f"Recognized {len(result.players)} players, {len(result.error_lines)} error lines, "
                f"{result.discarded_lines} discarded, {result.duplicate_lines} duplicates"
            )
        return result

    def _merge(
        self,
        players: Dict[str, PlayerRecord],
        player: PlayerRecord,
        result: RecognitionResult
    ) -> None:
        if player.name not in players:
            players[player.name] = player
            return

        result.duplicate_lines += 1
        if self.duplicate_policy == KEEP_LAST:
            # Assigning an existing key keeps its insertion slot
            players[player.name] = player
        if self.logger:
            self.logger.debug(f"Duplicate player '{player.name}' ({self.duplicate_policy})")
