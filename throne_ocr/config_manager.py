"""
Configuration management for the scoreboard pipeline.
Loads and validates JSON configuration files.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from throne_ocr.models import DEFAULT_ENEMY_LABEL
from throne_ocr.name_resolver import AliasTable
from throne_ocr.recognition import DUPLICATE_POLICIES, KEEP_FIRST
from throne_ocr.team_assigner import normalize_filter_color
from throne_ocr.utils import load_json

DEFAULT_CONFIG_PATH = str(Path(__file__).parent / 'configs' / 'default.json')

DEFAULT_IMAGE_EXTENSIONS = ['.png', '.jpg', '.jpeg', '.tiff', '.tif', '.bmp', '.gif']


def _merge(base: Dict[str, Any], overrides: Mapping[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            base_value = merged.get(key)
            nested = _merge(base_value if isinstance(base_value, dict) else {}, value)
            # An override of only unset values must not create a missing section
            if nested or isinstance(base_value, dict):
                merged[key] = nested
        else:
            merged[key] = value
    return merged


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        logger: Optional[logging.Logger] = None,
        overrides: Optional[Mapping[str, Any]] = None
    ):
        """
        Initialize config manager and load configuration.

        Args:
            config_path: Path to JSON pipeline config file
            logger: Logger instance
            overrides: Values merged over the file contents before validation;
                None values are ignored so unset CLI flags keep the file's value

        Raises:
            IOError: If config file cannot be loaded
            ValueError: If config validation fails
        """
        self.logger = logger
        self.config_path = config_path
        self.config = self._load_and_validate_config(config_path, overrides or {})

    def _load_and_validate_config(
        self,
        config_path: str,
        overrides: Mapping[str, Any]
    ) -> Dict[str, Any]:
        """
        Load and validate configuration from JSON file.

        Args:
            config_path: Path to JSON config file
            overrides: Values merged over the loaded file

        Returns:
            Validated configuration dictionary

        Raises:
            IOError: If config file cannot be loaded
            ValueError: If config validation fails
        """
        try:
            config = load_json(config_path, self.logger)
        except IOError as e:
            raise IOError(f"Failed to load config from {config_path}: {e}")

        if not isinstance(config, dict):
            raise ValueError(f"Config {config_path} must contain a JSON object")

        config = _merge(config, overrides)

        # Validate required fields
        required_fields = [
            'output_paths',
            'ocr',
            'class_registry',
            'filter_color',
        ]

        missing_fields = [f for f in required_fields if f not in config]
        if missing_fields:
            raise ValueError(f"Missing required config fields: {missing_fields}")

        # Validate output_paths
        required_output_paths = ['output', 'errors', 'raw_ocr', 'logs']
        missing_paths = [p for p in required_output_paths if p not in config['output_paths']]
        if missing_paths:
            raise ValueError(f"Missing required output paths: {missing_paths}")

        if not isinstance(config['ocr'], dict):
            raise ValueError("ocr must be an object")

        if not isinstance(config['class_registry'], str) or not config['class_registry'].strip():
            raise ValueError("class_registry must be a non-empty string")

        config['filter_color'] = normalize_filter_color(config['filter_color'])

        duplicate_policy = config.setdefault('duplicate_policy', KEEP_FIRST)
        if duplicate_policy not in DUPLICATE_POLICIES:
            raise ValueError(f"duplicate_policy must be one of {list(DUPLICATE_POLICIES)}, got {duplicate_policy!r}")

        max_workers = config.setdefault('max_workers', 0)
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 0:
            raise ValueError(f"max_workers must be a non-negative integer, got {max_workers!r}")

        aliases = config.get('name_aliases')
        if aliases is not None:
            self._validate_name_aliases(aliases)

        if self.logger:
            self.logger.info(f"Successfully loaded and validated config from {config_path}")

        return config

    def _validate_name_aliases(self, aliases: Any) -> None:
        """
        Check name_aliases maps each canonical name to a list of variant strings.

        Raises:
            ValueError: If the mapping or one of its groups has the wrong shape
        """
        if not isinstance(aliases, dict):
            raise ValueError("name_aliases must map canonical names to lists of variants")

        for canonical, variants in aliases.items():
            # A bare string would be read one character per variant
            if not isinstance(variants, (list, tuple)) or not all(isinstance(v, str) for v in variants):
                raise ValueError(
                    f"name_aliases[{canonical!r}] must be a list of strings, got {variants!r}"
                )

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def get_nested(self, keys: List[str], default: Any = None) -> Any:
        """
        Get nested configuration value.

        Args:
            keys: List of keys to traverse (e.g., ['output_paths', 'errors'])
            default: Default value if key path not found

        Returns:
            Configuration value
        """
        value = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
                if value is None:
                    return default
            else:
                return default
        return value

    def get_ocr_config(self) -> Dict[str, Any]:
        """Get OCR engine parameters."""
        return self.get('ocr', {})

    def get_output_paths(self) -> Dict[str, str]:
        """Get output paths."""
        return self.get('output_paths', {})

    def get_class_registry_path(self) -> str:
        return self.config['class_registry']

    def get_filter_color(self) -> str:
        """Get the operator's color ('yellow' or 'red'); rows of this color are Suits."""
        return self.config['filter_color']

    def get_enemy_label(self) -> str:
        return self.get('enemy_label') or DEFAULT_ENEMY_LABEL

    def get_duplicate_policy(self) -> str:
        return self.get('duplicate_policy', KEEP_FIRST)

    def get_max_workers(self) -> int:
        """Get OCR worker count (0 = one per CPU, 1 = sequential)."""
        return self.get('max_workers', 0)

    def get_image_extensions(self) -> List[str]:
        extensions = self.get('image_extensions') or DEFAULT_IMAGE_EXTENSIONS
        return [ext.lower() if ext.startswith('.') else f'.{ext.lower()}' for ext in extensions]

    def get_alias_table(self) -> AliasTable:
        """
        Get the name alias table.

        Returns:
            Table built from name_aliases when configured, the built-in table otherwise

        Raises:
            ValueError: If a variant maps to two canonical names
        """
        groups = self.get('name_aliases')
        if groups is None:
            return AliasTable.default()
        return AliasTable.from_groups(groups)
