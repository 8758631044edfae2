"""
Effect Plugins - Bildverarbeitung
"""
from .add_noise import AddNoiseEffect

__all__ = ['AddNoiseEffect']
