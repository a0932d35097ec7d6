"""
Decoder configuration.

The numeric type-discriminator values and the interface-position address
prefix are defined by the scanner software, so they are supplied through a
YAML file rather than hard-coded:

    ip_prefix: "192.168."
    profile: big-trimmed          # optional
    type_codes:
      raw_data: 1
      listmode_data: 2
      mich_data: 3
      energy_calibration_map: 4
      time_calibration_map: 5
      energy_spectrum_data: 6
"""

import yaml
from typing import NamedTuple, Optional

from .binary_format import DataTypeCodes, FormatProfile, get_profile


class ConfigError(ValueError):
    """Exception raised when a decoder configuration is invalid."""
    pass


class DecoderConfig(NamedTuple):
    """External constants the decoder depends on"""
    type_codes: DataTypeCodes
    ip_prefix: str
    profile: Optional[FormatProfile] = None


CONFIG_SCHEMA = {
    "mandatory": {
        "ip_prefix": str,
        "type_codes": dict,
    },
    "optional": {
        "profile": str,
    },
}


def validate_config_map(config_map: dict) -> bool:
    """Check keys and value types of a loaded configuration map"""
    if not isinstance(config_map, dict):
        raise ConfigError("Decoder configuration must be a mapping")

    for key, value_type in CONFIG_SCHEMA["mandatory"].items():
        if key not in config_map:
            raise ConfigError(f"Missing mandatory key in decoder configuration: {key}")
        if not isinstance(config_map[key], value_type):
            raise ConfigError(
                f"Incorrect type for mandatory key {key}: expected {value_type.__name__}, "
                f"got {type(config_map[key]).__name__}"
            )

    for key, value_type in CONFIG_SCHEMA["optional"].items():
        if key in config_map and not isinstance(config_map[key], value_type):
            raise ConfigError(
                f"Incorrect type for key {key}: expected {value_type.__name__}, "
                f"got {type(config_map[key]).__name__}"
            )

    codes = config_map["type_codes"]
    expected = set(DataTypeCodes._fields)
    missing = expected - set(codes)
    if missing:
        raise ConfigError(f"Missing type codes: {', '.join(sorted(missing))}")
    unknown = set(codes) - expected
    if unknown:
        raise ConfigError(f"Unknown type codes: {', '.join(sorted(map(str, unknown)))}")

    return True


def config_from_map(config_map: dict) -> DecoderConfig:
    """Build a DecoderConfig from an already-loaded mapping"""
    validate_config_map(config_map)
    try:
        type_codes = DataTypeCodes(**config_map["type_codes"]).validate()
        profile = get_profile(config_map["profile"]) if "profile" in config_map else None
    except ValueError as e:
        raise ConfigError(str(e)) from e
    return DecoderConfig(type_codes, config_map["ip_prefix"], profile)


def load_decoder_config(config_file: str) -> DecoderConfig:
    """
    Load decoder configuration from a YAML file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    try:
        with open(config_file, encoding='utf-8') as config_buffer:
            config_map = yaml.safe_load(config_buffer)
    except yaml.YAMLError as e:
        raise ConfigError(f"Decoder configuration not readable: {config_file}") from e
    except FileNotFoundError as e:
        raise ConfigError(f"Decoder configuration not found: {config_file}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Decoder configuration not readable: {config_file}: {e}") from e
    return config_from_map(config_map)
