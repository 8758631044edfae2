"""
Plugin-System für AddNoise
"""
from .plugin_base import PluginBase, PluginType, ParameterType

__all__ = ['PluginBase', 'PluginType', 'ParameterType']
