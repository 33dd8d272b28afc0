"""
Configuration for nested form serialization
"""

import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Literal, Optional, Union

from .errors import InvalidConfiguration

ArrayStrategy = Literal[
    "bracket-empty", "bracket-indexed", "repeat", "comma-joined", "custom"
]
ObjectStrategy = Literal["bracket", "dot", "underscore", "custom"]

ARRAY_STRATEGIES = ("bracket-empty", "bracket-indexed", "repeat", "comma-joined", "custom")
OBJECT_STRATEGIES = ("bracket", "dot", "underscore", "custom")

# Spellings used by older form helpers, normalized on construction
_ARRAY_STRATEGY_ALIASES = {
    "brackets": "bracket-empty",
    "indices": "bracket-indexed",
    "indexed": "bracket-indexed",
    "comma": "comma-joined",
    "none": "repeat",
}
_OBJECT_STRATEGY_ALIASES = {
    "brackets": "bracket",
    "rails": "bracket",
    "dots": "dot",
    "underscores": "underscore",
}

ArrayFormatter = Callable[[str, int], str]
ObjectFormatter = Callable[[str, str], str]


@dataclass(frozen=True)
class SerializationConfig:
    """Configuration for flattening nested values into form fields"""

    # Nesting conventions
    array_strategy: ArrayStrategy = "bracket-empty"
    object_strategy: ObjectStrategy = "bracket"
    custom_array_formatter: Optional[ArrayFormatter] = None
    custom_object_formatter: Optional[ObjectFormatter] = None

    # Guarding and key handling
    max_depth: int = 10
    encode_keys: bool = False

    # Comma-joined arrays
    array_delimiter: str = ","
    comma_round_trip: bool = False

    # Empty arrays emit a single empty field when enabled
    include_empty_arrays: bool = False

    # Serialize siblings as concurrent tasks, merged back in source order
    concurrent_siblings: bool = True

    def __post_init__(self):
        """Normalize strategy aliases and validate configuration values"""
        array_strategy = _ARRAY_STRATEGY_ALIASES.get(
            self.array_strategy, self.array_strategy
        )
        object_strategy = _OBJECT_STRATEGY_ALIASES.get(
            self.object_strategy, self.object_strategy
        )
        object.__setattr__(self, "array_strategy", array_strategy)
        object.__setattr__(self, "object_strategy", object_strategy)

        if array_strategy not in ARRAY_STRATEGIES:
            raise InvalidConfiguration(f"Unknown array strategy: {array_strategy!r}")
        if object_strategy not in OBJECT_STRATEGIES:
            raise InvalidConfiguration(f"Unknown object strategy: {object_strategy!r}")
        if array_strategy == "custom" and self.custom_array_formatter is None:
            raise InvalidConfiguration(
                "array_strategy 'custom' requires custom_array_formatter"
            )
        if object_strategy == "custom" and self.custom_object_formatter is None:
            raise InvalidConfiguration(
                "object_strategy 'custom' requires custom_object_formatter"
            )
        if (
            isinstance(self.max_depth, bool)
            or not isinstance(self.max_depth, int)
            or self.max_depth <= 0
        ):
            raise InvalidConfiguration("max_depth must be a positive integer")
        if not self.array_delimiter:
            raise InvalidConfiguration("array_delimiter must not be empty")

    @classmethod
    def option_names(cls) -> tuple:
        """Names accepted as configuration options"""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls) -> "SerializationConfig":
        """Create configuration from environment variables"""
        from .presets import resolve_config

        options: Dict[str, Any] = {}
        array_strategy = os.getenv("STRUCTURED_FORMS_ARRAY_STRATEGY")
        if array_strategy:
            options["array_strategy"] = array_strategy.lower()
        object_strategy = os.getenv("STRUCTURED_FORMS_OBJECT_STRATEGY")
        if object_strategy:
            options["object_strategy"] = object_strategy.lower()

        max_depth = os.getenv("STRUCTURED_FORMS_MAX_DEPTH")
        if max_depth:
            try:
                options["max_depth"] = int(max_depth)
            except ValueError:
                raise InvalidConfiguration(
                    f"STRUCTURED_FORMS_MAX_DEPTH must be an integer, got {max_depth!r}"
                ) from None

        delimiter = os.getenv("STRUCTURED_FORMS_ARRAY_DELIMITER")
        if delimiter:
            options["array_delimiter"] = delimiter

        for option, env_key, default in (
            ("encode_keys", "STRUCTURED_FORMS_ENCODE_KEYS", "false"),
            ("comma_round_trip", "STRUCTURED_FORMS_COMMA_ROUND_TRIP", "false"),
            ("include_empty_arrays", "STRUCTURED_FORMS_INCLUDE_EMPTY_ARRAYS", "false"),
            ("concurrent_siblings", "STRUCTURED_FORMS_CONCURRENT", "true"),
        ):
            if os.getenv(env_key) is not None:
                options[option] = cls._parse_bool_env(env_key, default)

        return resolve_config(options, preset=os.getenv("STRUCTURED_FORMS_PRESET") or None)


ConfigLike = Union[SerializationConfig, Dict[str, Any], None]

# Default configuration instance
DEFAULT_CONFIG = SerializationConfig()
