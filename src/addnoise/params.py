"""
Parameter-Marshaling - NoiseConfig <-> Host String-Map
"""
import math
from typing import Dict, Mapping

from .constants import (
    PARAM_NOISE_TYPE,
    PARAM_SIGMA,
    PARAM_MEAN,
    PARAM_SALT_P,
    PARAM_PEPPER_P,
    PARAM_MAP_KEYS,
)
from .exceptions import InvalidInputError
from .synthesizer import NoiseConfig, NoiseMode


def _parse_number(param_map: Mapping[str, str], key: str) -> float:
    raw = param_map[key]
    try:
        value = float(raw)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Parameter '{key}' ist keine Zahl: {raw!r}") from e
    if not math.isfinite(value):
        raise InvalidInputError(f"Parameter '{key}' muss endlich sein: {raw!r}")
    return value


def config_from_param_map(param_map: Mapping[str, str]) -> NoiseConfig:
    """
    Baut NoiseConfig aus der String-Map des Hosts.

    Args:
        param_map: {'m_noiseType': 'Gaussian', 'sigma': '10', ...}

    Returns:
        Validierte NoiseConfig

    Raises:
        InvalidInputError: fehlende Keys, nicht-numerische oder ungültige Werte
    """
    if param_map is None:
        raise InvalidInputError("Keine Parameter-Map")
    missing = [key for key in PARAM_MAP_KEYS if key not in param_map]
    if missing:
        raise InvalidInputError(f"Parameter fehlen: {', '.join(missing)}")

    config = NoiseConfig(
        mode=NoiseMode.from_name(param_map[PARAM_NOISE_TYPE]),
        sigma=_parse_number(param_map, PARAM_SIGMA),
        mean=_parse_number(param_map, PARAM_MEAN),
        salt_probability=_parse_number(param_map, PARAM_SALT_P),
        pepper_probability=_parse_number(param_map, PARAM_PEPPER_P),
    )
    config.validate()
    return config


def config_to_param_map(config: NoiseConfig) -> Dict[str, str]:
    """Serialisiert NoiseConfig in die String-Map des Hosts (ohne Seed)."""
    return {
        PARAM_NOISE_TYPE: config.mode.value,
        PARAM_SIGMA: repr(float(config.sigma)),
        PARAM_MEAN: repr(float(config.mean)),
        PARAM_SALT_P: repr(float(config.salt_probability)),
        PARAM_PEPPER_P: repr(float(config.pepper_probability)),
    }
