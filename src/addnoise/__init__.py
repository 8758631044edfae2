"""
AddNoise - Gaussian / Salt & Pepper Rauschen als Effekt-Plugin
"""
import logging

from .exceptions import AddNoiseError, InvalidInputError, ComputationFailureError
from .synthesizer import NoiseConfig, NoiseMode, apply_noise
from .params import config_from_param_map, config_to_param_map

__version__ = '1.0.0'

# Bibliothek: keine Handler am Root-Logger, siehe AddNoiseLogger.setup_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ['AddNoiseError', 'InvalidInputError', 'ComputationFailureError',
           'NoiseConfig', 'NoiseMode', 'apply_noise',
           'config_from_param_map', 'config_to_param_map',
           'PluginManager', 'get_plugin_manager', 'AddNoiseEffect']


def __getattr__(name):
    # Lazy imports
    if name == 'PluginManager':
        from .plugin_manager import PluginManager
        return PluginManager
    elif name == 'get_plugin_manager':
        from .plugin_manager import get_plugin_manager
        return get_plugin_manager
    elif name == 'AddNoiseEffect':
        from .plugins.effects.add_noise import AddNoiseEffect
        return AddNoiseEffect
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
