"""
Kommandozeile - Rauschen auf eine Bilddatei anwenden.

    addnoise input.png output.png --type Gaussian --mean 0 --sigma 25 --seed 42
    addnoise input.png output.png --type Salt_Pepper --salt 0.02 --pepper 0.04
"""
import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

import cv2

from .config_schema import ConfigValidator, validate_config_file, noise_config_from_settings, log_level_from_name
from .constants import IMAGE_EXTENSIONS, NOISE_TYPES, PLUGIN_ID
from .exceptions import InvalidInputError, ComputationFailureError
from .logger import AddNoiseLogger, LOG_DIR_ENV, get_logger
from .plugin_manager import get_plugin_manager
from .synthesizer import NoiseMode

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_COMPUTATION_FAILURE = 2


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="addnoise",
                                description="Gaussian oder Salt & Pepper Rauschen zu einem Bild hinzufügen")
    p.add_argument("input", help="Eingabebild (8-bit)")
    p.add_argument("output", help="Ausgabebild")
    p.add_argument("--config", default=None, help="config.json (Logging + Rausch-Defaults)")
    p.add_argument("--type", dest="noise_type", choices=NOISE_TYPES, default=None, help="Rausch-Typ")
    p.add_argument("--sigma", type=float, default=None, help="Gaussian: Standardabweichung")
    p.add_argument("--mean", type=float, default=None, help="Gaussian: Mittelwert")
    p.add_argument("--salt", type=float, default=None, help="Salt & Pepper: Salt-Schwelle [0, 1]")
    p.add_argument("--pepper", type=float, default=None, help="Salt & Pepper: Pepper-Schwelle [0, 1]")
    p.add_argument("--seed", type=int, default=None, help="Seed für reproduzierbares Rauschen")
    p.add_argument("--log-level", default=None, help="Console Log-Level (DEBUG, INFO, WARNING, ...)")
    return p.parse_args(argv)


def load_config(config_path=None):
    """Lädt und validiert Konfiguration; bei Fehlern Standard-Konfiguration."""
    validator = ConfigValidator()
    if config_path is None:
        return validator.get_default_config()

    is_valid, errors, config = validate_config_file(config_path)
    if not is_valid:
        print("⚠️  Config-Validierung fehlgeschlagen:", file=sys.stderr)
        for error in errors:
            print(f"    - {error}", file=sys.stderr)
        print("⚠️  Verwende Standard-Konfiguration", file=sys.stderr)
        return validator.get_default_config()

    # Fehlende Abschnitte aus Defaults ergänzen
    merged = validator.get_default_config()
    for section, values in config.items():
        if isinstance(values, dict) and section in merged:
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def _setup_logging(config, console_level_name=None):
    logging_cfg = config.get("logging", {})
    console_level_name = console_level_name or config.get("app", {}).get("console_log_level", "WARNING")
    AddNoiseLogger().setup_logging(
        log_dir=os.environ.get(LOG_DIR_ENV, logging_cfg.get("log_dir", "logs")),
        log_level=log_level_from_name(logging_cfg.get("log_level", "INFO"), default=logging.INFO),
        console_level=log_level_from_name(console_level_name),
        max_log_files=logging_cfg.get("max_log_files", 10),
    )


def _apply_overrides(noise_config, args):
    overrides = {}
    if args.noise_type is not None:
        overrides["mode"] = NoiseMode.from_name(args.noise_type)
    if args.sigma is not None:
        overrides["sigma"] = args.sigma
    if args.mean is not None:
        overrides["mean"] = args.mean
    if args.salt is not None:
        overrides["salt_probability"] = args.salt
    if args.pepper is not None:
        overrides["pepper_probability"] = args.pepper
    if args.seed is not None:
        overrides["seed"] = args.seed
    updated = dataclasses.replace(noise_config, **overrides)
    updated.validate()
    return updated


def main(argv=None):
    """Hauptfunktion der CLI. Gibt Exit-Code zurück."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
        _setup_logging(config, args.log_level)

        noise_config = _apply_overrides(noise_config_from_settings(config), args)

        if Path(args.output).suffix.lower() not in IMAGE_EXTENSIONS:
            raise InvalidInputError(f"Nicht unterstütztes Ausgabeformat: {args.output}")

        image = cv2.imread(args.input, cv2.IMREAD_UNCHANGED)
        if image is None:
            raise InvalidInputError(f"Bild konnte nicht gelesen werden: {args.input}")

        plugin = get_plugin_manager().load_plugin(PLUGIN_ID, noise_config)
        result = plugin.process_frame(image)

        if not cv2.imwrite(args.output, result):
            logger.error(f"Bild konnte nicht geschrieben werden: {args.output}")
            return EXIT_INVALID_INPUT

    except InvalidInputError as e:
        logger.error(f"Ungültige Eingabe: {e}")
        return EXIT_INVALID_INPUT
    except ComputationFailureError as e:
        logger.error(f"Rausch-Erzeugung fehlgeschlagen: {e}", exc_info=True)
        return EXIT_COMPUTATION_FAILURE
    except OSError as e:
        # Logging ist evtl. noch nicht eingerichtet
        print(f"⚠️  Dateizugriff fehlgeschlagen: {e}", file=sys.stderr)
        logger.error(f"Dateizugriff fehlgeschlagen: {e}")
        return EXIT_INVALID_INPUT

    logger.info(f"Gespeichert: {args.output} ({noise_config.mode.value})")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
