"""
Noise Synthesizer - Erzeugt Gaussian- oder Salt & Pepper-Rauschen auf 8-bit Bildern.

Das Quellbild wird nie verändert; jeder Aufruf liefert ein neu allokiertes Bild
gleicher Form. Überläufe werden auf [0, 255] gesättigt (wie bei cv::Mat-Addition).
"""
import math
import numbers
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import cv2
import numpy as np

from .constants import NOISE_GAUSSIAN, NOISE_SALT_PEPPER, PIXEL_MIN, PIXEL_MAX
from .exceptions import InvalidInputError, ComputationFailureError
from .logger import get_logger, log_performance

logger = get_logger(__name__)


class NoiseMode(Enum):
    """Rausch-Typen"""
    GAUSSIAN = NOISE_GAUSSIAN
    SALT_PEPPER = NOISE_SALT_PEPPER

    @classmethod
    def from_name(cls, name: str) -> 'NoiseMode':
        """
        Wandelt Host-Namen in NoiseMode um.

        "Gaussian" wählt Gaussian, jeder andere nicht-leere Name Salt & Pepper.

        Raises:
            InvalidInputError: Name fehlt oder ist leer
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str) or not name.strip():
            raise InvalidInputError(f"Ungültiger Rausch-Typ: {name!r}")
        if name.strip() == NOISE_GAUSSIAN:
            return cls.GAUSSIAN
        return cls.SALT_PEPPER


@dataclass
class NoiseConfig:
    """Rausch-Parameter für einen apply_noise() Aufruf"""
    mode: NoiseMode = NoiseMode.GAUSSIAN
    mean: float = 0.0
    sigma: float = 0.0
    salt_probability: float = 0.0
    pepper_probability: float = 0.0
    seed: Optional[int] = None

    def validate(self):
        """
        Prüft die Konfiguration.

        Raises:
            InvalidInputError: bei unbekanntem Modus, nicht-endlichen Zahlen,
                negativem Sigma oder Wahrscheinlichkeiten außerhalb [0, 1]
        """
        if not isinstance(self.mode, NoiseMode):
            raise InvalidInputError(f"mode muss NoiseMode sein, nicht {type(self.mode).__name__}")

        for name in ('mean', 'sigma', 'salt_probability', 'pepper_probability'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise InvalidInputError(f"{name} muss eine Zahl sein, nicht {value!r}")
            if not math.isfinite(value):
                raise InvalidInputError(f"{name} muss endlich sein, nicht {value!r}")

        if self.sigma < 0:
            raise InvalidInputError(f"sigma muss >= 0 sein, nicht {self.sigma}")

        for name in ('salt_probability', 'pepper_probability'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidInputError(f"{name} muss in [0, 1] liegen, nicht {value}")

        if self.seed is not None:
            if isinstance(self.seed, bool) or not isinstance(self.seed, numbers.Integral) or self.seed < 0:
                raise InvalidInputError(f"seed muss eine nicht-negative Ganzzahl sein, nicht {self.seed!r}")


def _check_source(source):
    if source is None:
        raise InvalidInputError("Kein Eingabebild")
    if not isinstance(source, np.ndarray):
        raise InvalidInputError(f"Eingabebild muss numpy.ndarray sein, nicht {type(source).__name__}")
    if source.ndim not in (2, 3):
        raise InvalidInputError(f"Eingabebild muss 2 oder 3 Dimensionen haben, nicht {source.ndim}")
    if source.size == 0:
        raise InvalidInputError(f"Leeres Bild (shape={source.shape})")
    if source.dtype != np.uint8:
        raise InvalidInputError(f"Eingabebild muss uint8 sein, nicht {source.dtype}")


def _gaussian_noise(source: np.ndarray, mean: float, sigma: float, rng: np.random.Generator) -> np.ndarray:
    # Ein Sample pro Pixel und Kanal
    noise = rng.normal(loc=mean, scale=sigma, size=source.shape)
    noisy = source.astype(np.float64) + noise
    return np.clip(np.rint(noisy), PIXEL_MIN, PIXEL_MAX).astype(np.uint8)


def _salt_pepper_noise(source: np.ndarray, salt_p: float, pepper_p: float, rng: np.random.Generator) -> np.ndarray:
    noise = np.zeros_like(source)

    # Ein Uniform-Wert pro Pixel (nicht pro Kanal)
    draws = rng.random(source.shape[:2])
    salt = draws < salt_p
    # Pepper-Schwelle wird direkt verglichen, nicht salt_p + pepper_p
    pepper = ~salt & (draws < pepper_p)

    noise[salt] = PIXEL_MAX
    noise[pepper] = PIXEL_MIN

    # cv2.add sättigt bei uint8; einkanalige 3D-Bilder kommen 2D zurück
    noisy = cv2.add(np.ascontiguousarray(source), noise)
    return noisy.reshape(source.shape)


def apply_noise(source: np.ndarray, config: NoiseConfig,
                rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Fügt Rauschen zu einem 8-bit Bild hinzu.

    Args:
        source: Eingabebild (uint8, HxW oder HxWxC), wird nicht verändert
        config: Rausch-Konfiguration
        rng: Optionaler Zufallsgenerator; sonst aus config.seed erzeugt

    Returns:
        Neues Bild mit gleicher Form und dtype

    Raises:
        InvalidInputError: leeres/fehlendes Bild oder ungültige Konfiguration
        ComputationFailureError: unerwarteter numpy/OpenCV-Fehler
    """
    _check_source(source)
    if not isinstance(config, NoiseConfig):
        raise InvalidInputError(f"config muss NoiseConfig sein, nicht {type(config).__name__}")
    config.validate()

    if rng is None:
        rng = np.random.default_rng(config.seed)

    start = time.perf_counter()
    try:
        if config.mode is NoiseMode.GAUSSIAN:
            result = _gaussian_noise(source, config.mean, config.sigma, rng)
        else:
            result = _salt_pepper_noise(source, config.salt_probability, config.pepper_probability, rng)
    except (cv2.error, ValueError, TypeError, MemoryError, FloatingPointError) as e:
        logger.error(f"Rausch-Erzeugung fehlgeschlagen ({config.mode.value}): {e}")
        raise ComputationFailureError(f"Rausch-Erzeugung fehlgeschlagen: {e}") from e

    logger.debug(f"{config.mode.value} Rauschen auf Bild {source.shape} angewendet")
    log_performance(logger, f"apply_noise[{config.mode.value}]", (time.perf_counter() - start) * 1000)
    return result
