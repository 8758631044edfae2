"""
Plugin Manager - Lädt, verwaltet und validiert Plugins
"""
import copy
import importlib
import inspect
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from .constants import PARAM_MAP_KEYS
from .logger import get_logger
from .plugins import PluginBase, PluginType, ParameterType
from .synthesizer import NoiseConfig

logger = get_logger(__name__)

EFFECTS_PACKAGE = 'addnoise.plugins.effects'


class PluginManager:
    """
    Verwaltet alle Plugins und stellt Registry zur Verfügung.

    Features:
    - Plugin Discovery (Scannen von addnoise/plugins/effects)
    - Plugin Registry (ID -> Plugin Class)
    - Typisierte Plugin-Erzeugung (NoiseConfig, Parameter-Dict oder Host String-Map)
    - Parameter Validation
    """

    def __init__(self, plugins_dir: Optional[str] = None):
        """
        Initialisiert PluginManager.

        Args:
            plugins_dir: Pfad zum effects/ Ordner (None = Paket-Verzeichnis)
        """
        if plugins_dir is None:
            plugins_dir = Path(__file__).parent / 'plugins' / 'effects'

        self.plugins_dir = Path(plugins_dir)
        self.registry: Dict[str, Type[PluginBase]] = {}

        self.discover_plugins()

    def discover_plugins(self, reload: bool = False):
        """
        Scannt effects/ Ordner nach Plugin-Klassen.
        Lädt alle Python-Module und registriert PluginBase-Subklassen.
        """
        logger.info(f"Plugin Discovery gestartet: {self.plugins_dir.absolute()}")

        if not self.plugins_dir.exists():
            logger.warning(f"Plugins-Ordner nicht gefunden: {self.plugins_dir.absolute()}")
            return

        for plugin_file in sorted(self.plugins_dir.glob('*.py')):
            if plugin_file.name.startswith('_'):
                continue  # Skip __init__.py

            module_path = f"{EFFECTS_PACKAGE}.{plugin_file.stem}"
            try:
                if reload and module_path in sys.modules:
                    module = importlib.reload(sys.modules[module_path])
                else:
                    module = importlib.import_module(module_path)
            except ImportError as e:
                logger.error(f"Fehler beim Laden von {module_path}: {e}", exc_info=True)
                continue

            for name, obj in inspect.getmembers(module, inspect.isclass):
                if issubclass(obj, PluginBase) and obj is not PluginBase and obj.__module__ == module.__name__:
                    try:
                        self.register_plugin(obj)
                        logger.debug(f"Plugin geladen: {obj.METADATA.get('id', 'unknown')} ({module_path})")
                    except ValueError as reg_err:
                        logger.error(f"Fehler beim Registrieren von {obj.__name__}: {reg_err}")

    def register_plugin(self, plugin_class: Type[PluginBase]):
        """
        Registriert Plugin-Klasse in Registry.

        Args:
            plugin_class: Plugin-Klasse (muss von PluginBase erben)
        """
        if not hasattr(plugin_class, 'METADATA') or 'id' not in plugin_class.METADATA:
            raise ValueError(f"Plugin {plugin_class.__name__} hat keine METADATA['id']")

        plugin_id = plugin_class.METADATA['id']

        if plugin_id in self.registry:
            logger.warning(f"Plugin mit ID '{plugin_id}' existiert bereits - überschreibe mit {plugin_class.__name__}")

        self.registry[plugin_id] = plugin_class
        logger.debug(f"Registered '{plugin_id}' in registry (total: {len(self.registry)})")

    @staticmethod
    def _is_host_param_map(plugin_class: Type[PluginBase], config: Mapping[str, Any]) -> bool:
        # Host-Keys die kein Plugin-Parameter sind (m_noiseType, m_salt_p, m_pepper_p)
        parameter_names = {p['name'] for p in plugin_class.PARAMETERS}
        return any(key in config for key in PARAM_MAP_KEYS if key not in parameter_names)

    def load_plugin(self, plugin_id: str,
                    config: Union[NoiseConfig, Mapping[str, Any], None] = None) -> Optional[PluginBase]:
        """
        Erstellt NEUE Plugin-Instanz.

        Args:
            plugin_id: Plugin-ID aus METADATA
            config: NoiseConfig, Parameter-Dict oder Host String-Map ('m_noiseType', ...)

        Returns:
            Plugin-Instanz oder None wenn ID unbekannt

        Raises:
            InvalidInputError: Konfiguration ungültig
        """
        if plugin_id not in self.registry:
            logger.warning(f"Plugin '{plugin_id}' nicht gefunden in Registry")
            return None

        plugin_class = self.registry[plugin_id]

        if isinstance(config, NoiseConfig):
            instance = plugin_class.from_noise_config(config)
        elif config is not None and self._is_host_param_map(plugin_class, config):
            instance = plugin_class()
            instance.set_param_map(config)
        else:
            instance = plugin_class(config=config)

        logger.debug(f"Plugin '{plugin_id}' erfolgreich geladen")
        return instance

    def list_plugins(self, plugin_type: Optional[PluginType] = None) -> List[Dict]:
        """
        Listet alle verfügbaren Plugins auf.

        Args:
            plugin_type: Optional - Filtert nach Plugin-Typ

        Returns:
            Liste von Plugin-Metadaten
        """
        result = []
        for plugin_id in self.registry:
            metadata = self.get_plugin_metadata(plugin_id)
            if plugin_type and metadata.get('type') != plugin_type.value:
                continue
            result.append(metadata)
        return result

    def get_plugin_metadata(self, plugin_id: str) -> Optional[Dict]:
        """
        Gibt METADATA eines Plugins zurück (Enum als String).

        Returns:
            METADATA Dictionary oder None
        """
        if plugin_id not in self.registry:
            return None

        metadata = self.registry[plugin_id].METADATA.copy()
        if 'type' in metadata and isinstance(metadata['type'], PluginType):
            metadata['type'] = metadata['type'].value
        return metadata

    def get_plugin_parameters(self, plugin_id: str) -> Optional[List[Dict]]:
        """
        Gibt PARAMETERS eines Plugins zurück (für UI-Generierung).

        Returns:
            PARAMETERS Array oder None
        """
        if plugin_id not in self.registry:
            return None

        parameters = copy.deepcopy(self.registry[plugin_id].PARAMETERS)
        for param in parameters:
            if 'type' in param and isinstance(param['type'], ParameterType):
                param['type'] = param['type'].value
        return parameters

    def validate_parameter_value(self, plugin_id: str, param_name: str, value) -> bool:
        """
        Validiert Parameter-Wert gegen Schema.

        Returns:
            True wenn valide, False sonst
        """
        if plugin_id not in self.registry:
            return False

        param_def = None
        for param in self.registry[plugin_id].PARAMETERS:
            if param['name'] == param_name:
                param_def = param
                break

        if not param_def:
            return False

        param_type = param_def['type']

        if param_type == ParameterType.FLOAT:
            if isinstance(value, bool):
                return False
            try:
                v = float(value)
            except (TypeError, ValueError):
                return False
            return param_def['min'] <= v <= param_def['max']

        elif param_type == ParameterType.SELECT:
            return value in param_def['options']

        return False

    def reload_plugins(self):
        """Lädt alle Plugins neu (für Development)."""
        self.registry.clear()
        self.discover_plugins(reload=True)
        logger.info("Alle Plugins neu geladen")

    def get_stats(self) -> Dict:
        """Gibt Statistiken über registrierte Plugins zurück."""
        return {
            'total_plugins': len(self.registry),
            'by_type': {
                plugin_type.value: len([p for p in self.registry.values()
                                        if p.METADATA.get('type') == plugin_type])
                for plugin_type in PluginType
            }
        }

    def __repr__(self):
        return f"<PluginManager plugins={len(self.registry)}>"


# Globale PluginManager-Instanz
_plugin_manager = None


def get_plugin_manager() -> PluginManager:
    """
    Singleton-Getter für PluginManager.

    Returns:
        Globale PluginManager-Instanz
    """
    global _plugin_manager
    if _plugin_manager is None:
        _plugin_manager = PluginManager()
    return _plugin_manager
