"""
Named nesting presets and the configuration resolver
"""

from dataclasses import asdict, fields, replace
from typing import Any, Dict, Mapping, Optional, Union

from .config import DEFAULT_CONFIG, SerializationConfig
from .errors import InvalidConfiguration

# Predefined partial configurations for common backend conventions
PRESETS: Dict[str, Dict[str, Any]] = {
    # Rails/PHP style: user[name], items[]
    "rails": {"array_strategy": "bracket-empty", "object_strategy": "bracket"},
    # Indexed brackets: user[name], items[0]
    "php_indexed": {"array_strategy": "bracket-indexed", "object_strategy": "bracket"},
    # Dot notation: user.name, items[0]
    "dot": {"array_strategy": "bracket-indexed", "object_strategy": "dot"},
    # Underscore notation: user_name, items[0]
    "underscore": {"array_strategy": "bracket-indexed", "object_strategy": "underscore"},
    # Comma separated arrays: items=a,b,c
    "comma": {
        "array_strategy": "comma-joined",
        "object_strategy": "bracket",
        "array_delimiter": ",",
    },
    # Repeated keys: items=a&items=b
    "repeat": {"array_strategy": "repeat", "object_strategy": "bracket"},
}


def get_preset(name: str) -> Dict[str, Any]:
    """Return a copy of a named preset"""
    try:
        return dict(PRESETS[name])
    except KeyError:
        raise InvalidConfiguration(
            f"Unknown preset {name!r}; expected one of {sorted(PRESETS)}"
        ) from None


def _check_option_names(options: Mapping[str, Any]) -> None:
    known = SerializationConfig.option_names()
    unknown = [name for name in options if name not in known]
    if unknown:
        raise InvalidConfiguration(f"Unknown serialization options: {unknown}")


def resolve_config(
    options: Union[SerializationConfig, Mapping[str, Any], None] = None,
    *,
    preset: Optional[str] = None,
    **overrides: Any,
) -> SerializationConfig:
    """
    Merge user options over the defaults and return a validated config

    Layers are applied in order: defaults, the named preset, ``options``,
    then keyword ``overrides``. Validation happens once on the merged
    result, so a custom strategy without its formatter fails here before
    any traversal starts.

    Args:
        options: Partial option mapping or an existing SerializationConfig
        preset: Name of an entry in PRESETS
        **overrides: Individual option values

    Returns:
        A frozen SerializationConfig

    Raises:
        InvalidConfiguration: For unknown option names, unknown presets,
            or an invalid merged configuration
    """
    if isinstance(options, SerializationConfig) and preset is None and not overrides:
        return options

    merged: Dict[str, Any] = {}
    if preset is not None:
        merged.update(get_preset(preset))

    if isinstance(options, SerializationConfig):
        # Only fields changed from the defaults override the preset
        merged.update(
            {
                f.name: getattr(options, f.name)
                for f in fields(options)
                if getattr(options, f.name) != getattr(DEFAULT_CONFIG, f.name)
            }
        )
    elif options is not None:
        _check_option_names(options)
        merged.update(options)

    _check_option_names(overrides)
    merged.update(overrides)

    if not merged:
        return DEFAULT_CONFIG
    return replace(DEFAULT_CONFIG, **merged)


def describe_config(config: SerializationConfig) -> Dict[str, Any]:
    """Plain dict view of a config with formatters replaced by their names"""
    described = asdict(config)
    for name in ("custom_array_formatter", "custom_object_formatter"):
        formatter = described[name]
        if formatter is not None:
            described[name] = getattr(formatter, "__name__", repr(formatter))
    return described
