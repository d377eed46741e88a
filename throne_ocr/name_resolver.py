"""
Player name cleanup and alias resolution.
Maps recurring OCR misreadings of player names to their canonical spelling.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

# Canonical name -> OCR misreadings seen in scoreboard captures
DEFAULT_NAME_ALIAS_GROUPS: Dict[str, list] = {
    'Gaaiaa': ['gaiaaa', 'gaiaa', 'gaaiaaa'],
    'Requiem': ['requrem', 'requzem'],
    'Elyeat': ['elveat'],
    'Pradel': ['xpradel'],
    'FxT1': ['fxt1', 'fxti', 'fxtl', 'exti'],
}

_NON_ALPHANUMERIC = re.compile(r'[^a-zA-Z0-9]')
_LEADING_DIGITS = re.compile(r'^[0-9]+')


@dataclass(frozen=True)
class AliasTable:
    """Lowercased misreading -> canonical name lookup."""

    lookup: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_groups(cls, groups: Mapping[str, Iterable[str]]) -> 'AliasTable':
        """
        Build a table from canonical -> variants groups.

        Args:
            groups: Mapping of canonical name to its known misreadings

        Returns:
            AliasTable keyed by lowercased variant

        Raises:
            ValueError: If one variant is claimed by two canonical names
        """
        lookup: Dict[str, str] = {}
        for canonical, variants in groups.items():
            for variant in variants:
                key = variant.strip().lower()
                if not key:
                    continue
                if key in lookup and lookup[key] != canonical:
                    raise ValueError(
                        f"Alias '{variant}' maps to both '{lookup[key]}' and '{canonical}'"
                    )
                lookup[key] = canonical
        return cls(lookup=lookup)

    @classmethod
    def default(cls) -> 'AliasTable':
        return cls.from_groups(DEFAULT_NAME_ALIAS_GROUPS)

    def match(self, name: str) -> str:
        """Return the canonical form of name, or name unchanged."""
        return self.lookup.get(name.lower(), name)

    def __len__(self) -> int:
        return len(self.lookup)


def _capitalize(name: str) -> str:
    # Only the first character changes; "fxT1" must not become "Fxt1"
    return name[:1].upper() + name[1:]


class NameResolver:
    """Turns a raw OCR name cell into a canonical player name."""

    def __init__(self, aliases: Optional[AliasTable] = None):
        """
        Initialize resolver with an alias table.

        Args:
            aliases: Alias table to apply (defaults to the built-in table)
        """
        self.aliases = aliases if aliases is not None else AliasTable.default()

    def resolve(self, name_cell: Optional[str]) -> str:
        """
        Resolve a raw name cell.

        Strips everything but ASCII letters and digits, drops rank numbers
        that OCR glued to the front of the name, applies the alias table and
        upper-cases the first character.

        Args:
            name_cell: Raw cell text preceding the color cell

        Returns:
            Canonical name, or an empty string if nothing usable remains
        """
        if not name_cell or not name_cell.strip():
            return ''

        name = _NON_ALPHANUMERIC.sub('', name_cell)
        name = _LEADING_DIGITS.sub('', name)
        if not name:
            return ''

        name = self.aliases.match(name)
        return _capitalize(name.strip())
