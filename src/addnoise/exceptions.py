"""
Fehlerklassen für AddNoise
"""


class AddNoiseError(Exception):
    """Basisklasse für alle AddNoise-Fehler."""


class InvalidInputError(AddNoiseError, ValueError):
    """Leeres/fehlendes Bild oder ungültige Rausch-Konfiguration."""


class ComputationFailureError(AddNoiseError, RuntimeError):
    """Unerwarteter Fehler bei der Rausch-Erzeugung (Ursache in __cause__)."""
