"""
Plugin Base Class - Foundation für alle Effekt-Plugins
"""
import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)

ParameterListener = Callable[[str, Any], None]


class PluginType(Enum):
    """Plugin-Typen"""
    EFFECT = "effect"         # Verarbeitet Bilder (z.B. AddNoise)


class ParameterType(Enum):
    """Parameter-Typen für UI-Generierung"""
    FLOAT = "float"           # Double-Spinbox / Slider (min, max, step)
    SELECT = "select"         # Dropdown (options array)


class PluginBase(ABC):
    """
    Base-Klasse für alle Plugins.

    Jedes Plugin muss METADATA und PARAMETERS definieren sowie die abstrakten
    Methoden implementieren. Ein UI (oder ein anderer Host) bindet sich über
    add_parameter_listener() an Parameter-Änderungen; das Plugin selbst kennt
    kein UI-Toolkit.
    """

    # METADATA - Muss von Subclass definiert werden
    METADATA: Dict[str, Any] = {}

    # PARAMETERS - Muss von Subclass definiert werden
    PARAMETERS: List[Dict[str, Any]] = []

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialisiert Plugin mit Konfiguration.

        Args:
            config: Dictionary mit Parameter-Werten (Key = Parameter Name)
        """
        self.config = dict(config) if config else {}
        self._listeners: List[ParameterListener] = []

        self._cached_metadata_json = None
        self._cached_parameters_json = None

        self.validate_metadata()
        self.validate_parameters()
        self.initialize(self.config)

    def validate_metadata(self):
        """Validiert METADATA gegen Schema."""
        required_fields = ['id', 'name', 'type']
        for field in required_fields:
            if field not in self.METADATA:
                raise ValueError(f"Plugin {self.__class__.__name__} fehlt METADATA['{field}']")

        if not isinstance(self.METADATA['type'], PluginType):
            raise ValueError(f"Plugin {self.METADATA['id']}: METADATA['type'] muss PluginType Enum sein")

    def validate_parameters(self):
        """Validiert PARAMETERS Array gegen Schema."""
        for param in self.PARAMETERS:
            if 'name' not in param or 'type' not in param:
                raise ValueError(f"Plugin {self.METADATA['id']}: Parameter fehlt 'name' oder 'type'")

            if not isinstance(param['type'], ParameterType):
                raise ValueError(f"Plugin {self.METADATA['id']}: Parameter '{param['name']}' type muss ParameterType Enum sein")

            if param['type'] == ParameterType.FLOAT:
                if 'min' not in param or 'max' not in param:
                    raise ValueError(f"Plugin {self.METADATA['id']}: Parameter '{param['name']}' vom Typ float benötigt 'min' und 'max'")

            elif param['type'] == ParameterType.SELECT:
                if 'options' not in param or not isinstance(param['options'], list):
                    raise ValueError(f"Plugin {self.METADATA['id']}: Parameter '{param['name']}' vom Typ SELECT benötigt 'options' Array")

    @abstractmethod
    def initialize(self, config: Dict[str, Any]):
        """
        Initialisiert Plugin mit Parametern.

        Args:
            config: Dictionary mit Parameter-Werten
        """

    @abstractmethod
    def update_parameter(self, name: str, value: Any) -> bool:
        """
        Aktualisiert einen Parameter zur Laufzeit.

        Subklassen rufen nach erfolgreicher Änderung _notify_listeners() auf.

        Returns:
            True wenn Parameter existiert und aktualisiert wurde, False sonst
        """

    @abstractmethod
    def get_parameters(self) -> Dict[str, Any]:
        """Gibt aktuelle Parameter-Werte zurück."""

    def cleanup(self):
        """Cleanup-Methode für Plugin-Ressourcen."""
        self._listeners.clear()

    # --- EFFECT Plugins ---
    def process_frame(self, frame: np.ndarray, **kwargs) -> np.ndarray:
        """
        Verarbeitet Bild (für EFFECT Plugins).

        Args:
            frame: Eingabebild (NumPy Array)
            **kwargs: Zusätzliche Kontext-Daten

        Returns:
            Verarbeitetes Bild (NumPy Array)
        """
        raise NotImplementedError(f"Plugin {self.METADATA['id']} implementiert keine process_frame() Methode")

    # ========================================
    # PARAMETER BINDING
    # ========================================

    def add_parameter_listener(self, callback: ParameterListener):
        """Registriert callback(name, value) für Parameter-Änderungen."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_parameter_listener(self, callback: ParameterListener) -> bool:
        """Entfernt Listener. Gibt False zurück wenn er nicht registriert war."""
        try:
            self._listeners.remove(callback)
            return True
        except ValueError:
            return False

    def _notify_listeners(self, name: str, value: Any):
        for callback in list(self._listeners):
            try:
                callback(name, value)
            except Exception as e:
                logger.error(f"Parameter-Listener Fehler ({self.METADATA['id']}.{name}): {e}", exc_info=True)

    # ========================================
    # HELPER METHODS
    # ========================================

    def get_parameter_schema(self) -> List[Dict[str, Any]]:
        """Gibt PARAMETERS Array für UI-Generierung zurück."""
        return self.PARAMETERS

    def get_metadata(self) -> Dict[str, Any]:
        """Gibt METADATA Dictionary zurück."""
        return self.METADATA

    def get_metadata_json(self) -> Dict[str, Any]:
        """
        Gibt METADATA Dictionary mit Enum→String Konvertierung zurück (gecacht).

        Returns:
            Plugin-Metadaten mit serialisierten Enums
        """
        if self._cached_metadata_json is None:
            metadata = self.METADATA.copy()
            if 'type' in metadata and isinstance(metadata['type'], PluginType):
                metadata['type'] = metadata['type'].value
            self._cached_metadata_json = metadata

        return self._cached_metadata_json

    def get_parameters_json(self) -> List[Dict[str, Any]]:
        """
        Gibt PARAMETERS Array mit Enum→String Konvertierung zurück (gecacht).

        Returns:
            Parameter-Definitionen mit serialisierten Enums
        """
        if self._cached_parameters_json is None:
            # Deep copy, damit class-level PARAMETERS unverändert bleibt
            parameters = copy.deepcopy(self.PARAMETERS)
            for param in parameters:
                if 'type' in param and isinstance(param['type'], ParameterType):
                    param['type'] = param['type'].value
            self._cached_parameters_json = parameters

        return self._cached_parameters_json

    def __repr__(self):
        return f"<{self.__class__.__name__} id={self.METADATA.get('id', 'unknown')} type={self.METADATA.get('type', 'unknown')}>"
