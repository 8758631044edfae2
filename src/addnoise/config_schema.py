"""
Configuration Schema - JSON Schema für config.json Validierung
"""
import json
import logging
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator

from .constants import NOISE_TYPES, NOISE_GAUSSIAN, DEFAULT_LOG_DIR, DEFAULT_MAX_LOG_FILES
from .logger import get_logger
from .synthesizer import NoiseConfig, NoiseMode

logger = get_logger(__name__)

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# JSON Schema für config.json
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "app": {
            "type": "object",
            "properties": {
                "console_log_level": {
                    "type": "string",
                    "enum": LOG_LEVELS,
                    "description": "Log-Level für Konsolen-Ausgabe"
                }
            }
        },
        "logging": {
            "type": "object",
            "properties": {
                "log_dir": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Verzeichnis für Log-Dateien"
                },
                "log_level": {
                    "type": "string",
                    "enum": LOG_LEVELS,
                    "description": "Log-Level für Log-Datei"
                },
                "max_log_files": {
                    "type": "integer",
                    "minimum": 0,
                    "description": "Maximale Anzahl Log-Dateien (0 = unbegrenzt)"
                }
            }
        },
        "noise": {
            "type": "object",
            "properties": {
                "noise_type": {
                    "type": "string",
                    "enum": NOISE_TYPES,
                    "description": "Rausch-Typ"
                },
                "sigma": {
                    "type": "number",
                    "minimum": 0,
                    "description": "Standardabweichung (Gaussian)"
                },
                "mean": {
                    "type": "number",
                    "description": "Mittelwert (Gaussian)"
                },
                "salt_probability": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 1,
                    "description": "Salt-Schwelle"
                },
                "pepper_probability": {
                    "type": "number",
                    "minimum": 0,
                    "maximum": 1,
                    "description": "Pepper-Schwelle"
                },
                "seed": {
                    "type": ["integer", "null"],
                    "minimum": 0,
                    "description": "Seed für reproduzierbares Rauschen (null = zufällig)"
                }
            },
            "additionalProperties": False
        }
    }
}


class ConfigValidator:
    """Validiert Konfigurationsdateien gegen JSON Schema."""

    def __init__(self):
        self.validator = Draft7Validator(CONFIG_SCHEMA)

    def validate(self, config: Dict[str, Any]) -> Tuple[bool, List[str]]:
        """
        Validiert Konfiguration.

        Args:
            config: Configuration Dictionary

        Returns:
            Tuple[bool, List[str]]: (is_valid, error_messages)
        """
        errors = []

        for error in self.validator.iter_errors(config):
            path = ".".join(str(p) for p in error.path) if error.path else "root"
            errors.append(f"{path}: {error.message}")

        errors.extend(self._custom_validations(config))

        if errors:
            logger.error(f"Config-Validierung fehlgeschlagen: {len(errors)} Fehler")
            for error in errors:
                logger.error(f"  - {error}")
        else:
            logger.info("Config-Validierung erfolgreich")

        return len(errors) == 0, errors

    def _custom_validations(self, config: Dict[str, Any]) -> List[str]:
        """
        Führt zusätzliche Custom-Validierungen durch.

        Returns:
            List[str]: Liste von Fehlermeldungen
        """
        errors = []
        noise = config.get("noise") if isinstance(config, dict) else None
        if not isinstance(noise, dict):
            return errors

        salt = noise.get("salt_probability", 0.0)
        pepper = noise.get("pepper_probability", 0.0)
        if isinstance(salt, (int, float)) and isinstance(pepper, (int, float)) and 0 < pepper <= salt:
            # Pepper wird gegen dieselbe Uniform-Zahl geprüft und kommt dann nie zum Zug
            logger.warning(
                f"noise.pepper_probability ({pepper}) <= noise.salt_probability ({salt}): "
                f"es entstehen keine Pepper-Pixel"
            )

        return errors

    def get_schema(self) -> Dict[str, Any]:
        """Gibt das vollständige Schema zurück."""
        return CONFIG_SCHEMA

    def get_default_config(self) -> Dict[str, Any]:
        """
        Generiert Standard-Konfiguration.

        Returns:
            Dict[str, Any]: Default Configuration
        """
        return {
            "app": {
                "console_log_level": "WARNING"
            },
            "logging": {
                "log_dir": DEFAULT_LOG_DIR,
                "log_level": "INFO",
                "max_log_files": DEFAULT_MAX_LOG_FILES
            },
            "noise": {
                "noise_type": NOISE_GAUSSIAN,
                "sigma": 0.0,
                "mean": 0.0,
                "salt_probability": 0.0,
                "pepper_probability": 0.0,
                "seed": None
            }
        }


def validate_config_file(config_path: str) -> Tuple[bool, List[str], Dict[str, Any]]:
    """
    Lädt und validiert Config-Datei.

    Args:
        config_path: Pfad zur config.json

    Returns:
        Tuple[bool, List[str], Dict]: (is_valid, errors, config_dict)
    """
    validator = ConfigValidator()

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
    except FileNotFoundError:
        return False, [f"Config-Datei nicht gefunden: {config_path}"], {}
    except json.JSONDecodeError as e:
        return False, [f"JSON-Parsing Fehler: {str(e)}"], {}
    except OSError as e:
        return False, [f"Fehler beim Laden der Config: {str(e)}"], {}

    is_valid, errors = validator.validate(config)
    return is_valid, errors, config


def _coerce_seed(seed):
    # JSON-Schema "integer" akzeptiert auch 1.0
    if isinstance(seed, float) and seed.is_integer():
        return int(seed)
    return seed


def noise_config_from_settings(config: Dict[str, Any]) -> NoiseConfig:
    """
    Baut NoiseConfig aus dem 'noise'-Abschnitt einer (validierten) Konfiguration.

    Fehlende Werte werden aus der Standard-Konfiguration ergänzt.
    """
    noise = dict(ConfigValidator().get_default_config()["noise"])
    noise.update(config.get("noise", {}))

    noise_config = NoiseConfig(
        mode=NoiseMode.from_name(noise["noise_type"]),
        mean=float(noise["mean"]),
        sigma=float(noise["sigma"]),
        salt_probability=float(noise["salt_probability"]),
        pepper_probability=float(noise["pepper_probability"]),
        seed=_coerce_seed(noise["seed"]),
    )
    noise_config.validate()
    return noise_config


def log_level_from_name(name: str, default: int = logging.WARNING) -> int:
    """Wandelt Level-Namen ('DEBUG', ...) in logging-Konstante um."""
    level = logging.getLevelName(str(name).upper())
    return level if isinstance(level, int) else default
