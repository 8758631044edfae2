"""
AddNoise Effect Plugin - Gaussian oder Salt & Pepper Rauschen
"""
import dataclasses
from typing import Any, Callable, Dict, Mapping, Optional

import numpy as np

from ..plugin_base import PluginBase, PluginType, ParameterType
from ...constants import NOISE_GAUSSIAN, NOISE_TYPES, PLUGIN_ID, PLUGIN_NAME, PLUGIN_VERSION, PROGRESS_STEPS
from ...exceptions import InvalidInputError
from ...logger import get_logger
from ...params import config_from_param_map, config_to_param_map
from ...synthesizer import NoiseConfig, NoiseMode, apply_noise

logger = get_logger(__name__)

# Plugin-Parameter -> NoiseConfig Feld
_FIELD_BY_PARAMETER = {
    'sigma': 'sigma',
    'mean': 'mean',
    'salt_probability': 'salt_probability',
    'pepper_probability': 'pepper_probability',
}


class AddNoiseEffect(PluginBase):
    """
    AddNoise Effect - Fügt Gaussian- oder Salt & Pepper-Rauschen zum Bild hinzu.
    """

    METADATA = {
        'id': PLUGIN_ID,
        'name': PLUGIN_NAME,
        'description': 'add different noise types to image like: salt&pepper noise, gaussian noise',
        'author': '',
        'version': PLUGIN_VERSION,
        'type': PluginType.EFFECT,
        'path': 'Plugins',
        'icon_path': '',
        'keywords': 'salt and pepper noise, gaussian noise',
        'category': 'Noise'
    }

    PARAMETERS = [
        {
            'name': 'noise_type',
            'label': 'NoiseType',
            'type': ParameterType.SELECT,
            'default': NOISE_GAUSSIAN,
            'options': list(NOISE_TYPES),
            'description': 'Rausch-Typ (Gaussian = normalverteilt, Salt_Pepper = weiße/schwarze Pixel)'
        },
        {
            'name': 'sigma',
            'label': 'Sigma',
            'type': ParameterType.FLOAT,
            'default': 0.0,
            'min': 0.0,
            'max': 255.0,
            'step': 1.0,
            'decimals': 4,
            'description': 'Standardabweichung des Gaussian-Rauschens'
        },
        {
            'name': 'mean',
            'label': 'Mean',
            'type': ParameterType.FLOAT,
            'default': 0.0,
            'min': 0.0,
            'max': 255.0,
            'step': 1.0,
            'decimals': 4,
            'description': 'Mittelwert des Gaussian-Rauschens'
        },
        {
            'name': 'salt_probability',
            'label': 'salt probability',
            'type': ParameterType.FLOAT,
            'default': 0.0,
            'min': 0.0,
            'max': 1.0,
            'step': 0.01,
            'decimals': 4,
            'description': 'Schwelle für weiße Pixel (Uniform-Wert < salt)'
        },
        {
            'name': 'pepper_probability',
            'label': 'Pepper probability',
            'type': ParameterType.FLOAT,
            'default': 0.0,
            'min': 0.0,
            'max': 1.0,
            'step': 0.01,
            'decimals': 4,
            'description': 'Schwelle für schwarze Pixel (Uniform-Wert < pepper, wenn nicht salt)'
        }
    ]

    def initialize(self, config):
        """Initialisiert Plugin mit Rausch-Parametern."""
        self.noise_config = NoiseConfig(
            mode=NoiseMode.from_name(config.get('noise_type', NOISE_GAUSSIAN)),
            mean=self._to_float('mean', config.get('mean', 0.0)),
            sigma=self._to_float('sigma', config.get('sigma', 0.0)),
            salt_probability=self._to_float('salt_probability', config.get('salt_probability', 0.0)),
            pepper_probability=self._to_float('pepper_probability', config.get('pepper_probability', 0.0)),
            seed=self._to_seed(config.get('seed')),
        )
        self.noise_config.validate()

    @classmethod
    def from_noise_config(cls, noise_config: NoiseConfig) -> 'AddNoiseEffect':
        """Erstellt Plugin direkt aus einer NoiseConfig."""
        noise_config.validate()
        plugin = cls()
        plugin.noise_config = dataclasses.replace(noise_config)
        return plugin

    @staticmethod
    def _to_float(name: str, value: Any) -> float:
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Parameter '{name}' ist keine Zahl: {value!r}") from e

    @staticmethod
    def _to_seed(value: Any) -> Optional[int]:
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"seed ist keine Ganzzahl: {value!r}") from e

    def get_progress_steps(self) -> int:
        """Anzahl Fortschritts-Schritte pro process_frame() Aufruf."""
        return PROGRESS_STEPS

    def process_frame(self, frame, rng: Optional[np.random.Generator] = None,
                      progress_callback: Optional[Callable[[int, int], None]] = None, **kwargs):
        """
        Wendet Rauschen auf das Bild an.

        Args:
            frame: Eingabebild (uint8), wird nicht verändert
            rng: Optionaler Zufallsgenerator (sonst aus seed)
            progress_callback: Optional callback(step, total)
            **kwargs: Unused

        Returns:
            Neues verrauschtes Bild
        """
        result = apply_noise(frame, self.noise_config, rng=rng)
        if progress_callback:
            progress_callback(PROGRESS_STEPS, self.get_progress_steps())
        return result

    def update_parameter(self, name, value):
        """
        Aktualisiert Parameter zur Laufzeit.

        Raises:
            InvalidInputError: Wert ungültig (Konfiguration bleibt unverändert)
        """
        if name == 'noise_type':
            updated = dataclasses.replace(self.noise_config, mode=NoiseMode.from_name(value))
        elif name in _FIELD_BY_PARAMETER:
            field = _FIELD_BY_PARAMETER[name]
            updated = dataclasses.replace(self.noise_config, **{field: self._to_float(name, value)})
        elif name == 'seed':
            updated = dataclasses.replace(self.noise_config, seed=self._to_seed(value))
        else:
            return False

        updated.validate()
        self.noise_config = updated
        self._notify_listeners(name, self.get_parameters()[name])
        return True

    def get_parameters(self):
        """Gibt aktuelle Parameter-Werte zurück."""
        return {
            'noise_type': self.noise_config.mode.value,
            'sigma': self.noise_config.sigma,
            'mean': self.noise_config.mean,
            'salt_probability': self.noise_config.salt_probability,
            'pepper_probability': self.noise_config.pepper_probability,
            'seed': self.noise_config.seed
        }

    def set_param_map(self, param_map: Mapping[str, str]):
        """Übernimmt Parameter aus der String-Map des Hosts (Seed bleibt erhalten)."""
        parsed = config_from_param_map(param_map)
        previous = self.get_parameters()
        self.noise_config = dataclasses.replace(parsed, seed=self.noise_config.seed)
        logger.debug(f"Parameter-Map übernommen: {self.noise_config}")

        for name, value in self.get_parameters().items():
            if previous[name] != value:
                self._notify_listeners(name, value)

    def get_param_map(self) -> Dict[str, str]:
        """Gibt Parameter als String-Map für den Host zurück."""
        return config_to_param_map(self.noise_config)
