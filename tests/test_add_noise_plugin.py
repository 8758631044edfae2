"""
Test AddNoise Effect Plugin
"""
import numpy as np
import pytest

from addnoise.exceptions import InvalidInputError
from addnoise.plugins import PluginType
from addnoise.plugins.effects.add_noise import AddNoiseEffect
from addnoise.synthesizer import NoiseConfig, NoiseMode


class TestAddNoiseEffect:
    """Test cases for AddNoise Effect Plugin"""

    @pytest.fixture
    def plugin(self):
        """Create plugin instance"""
        return AddNoiseEffect()

    @pytest.fixture
    def test_frame(self):
        """Create test frame (10x10 grey frame)"""
        return np.full((10, 10, 3), 100, dtype=np.uint8)

    def test_metadata(self, plugin):
        metadata = plugin.get_metadata()

        assert metadata['id'] == 'add_noise'
        assert metadata['name'] == 'AddNoise'
        assert metadata['version'] == '1.0.0'
        assert metadata['type'] is PluginType.EFFECT
        assert 'gaussian noise' in metadata['keywords']

    def test_metadata_json_has_string_type(self, plugin):
        assert plugin.get_metadata_json()['type'] == 'effect'
        assert plugin.METADATA['type'] is PluginType.EFFECT

    def test_parameters_json_has_string_types(self, plugin):
        params = {p['name']: p for p in plugin.get_parameters_json()}

        assert params['noise_type']['type'] == 'select'
        assert params['noise_type']['options'] == ['Gaussian', 'Salt_Pepper']
        assert params['sigma']['type'] == 'float'
        assert params['salt_probability']['max'] == 1.0

    def test_defaults(self, plugin):
        assert plugin.get_parameters() == {
            'noise_type': 'Gaussian',
            'sigma': 0.0,
            'mean': 0.0,
            'salt_probability': 0.0,
            'pepper_probability': 0.0,
            'seed': None
        }

    def test_default_plugin_is_noop(self, plugin, test_frame):
        result = plugin.process_frame(test_frame)

        assert np.array_equal(result, test_frame)

    def test_config_initialization(self, test_frame):
        plugin = AddNoiseEffect(config={'noise_type': 'Salt_Pepper', 'salt_probability': 1.0})

        assert plugin.noise_config.mode is NoiseMode.SALT_PEPPER
        assert np.all(plugin.process_frame(test_frame) == 255)

    def test_invalid_config_initialization(self):
        with pytest.raises(InvalidInputError):
            AddNoiseEffect(config={'sigma': 'loud'})

        with pytest.raises(InvalidInputError):
            AddNoiseEffect(config={'salt_probability': 3})

    def test_from_noise_config(self):
        config = NoiseConfig(mode=NoiseMode.GAUSSIAN, mean=10, sigma=2, seed=5)
        plugin = AddNoiseEffect.from_noise_config(config)

        assert plugin.noise_config == config
        assert plugin.noise_config is not config

    def test_update_parameter(self, plugin):
        assert plugin.update_parameter('sigma', 12.5)
        assert plugin.update_parameter('noise_type', 'Salt_Pepper')
        assert plugin.update_parameter('pepper_probability', '0.25')

        params = plugin.get_parameters()
        assert params['sigma'] == 12.5
        assert params['noise_type'] == 'Salt_Pepper'
        assert params['pepper_probability'] == 0.25

    def test_update_unknown_parameter(self, plugin):
        assert plugin.update_parameter('intensity', 0.5) is False

    def test_update_invalid_value_keeps_config(self, plugin):
        plugin.update_parameter('salt_probability', 0.3)

        with pytest.raises(InvalidInputError):
            plugin.update_parameter('salt_probability', 2.0)
        with pytest.raises(InvalidInputError):
            plugin.update_parameter('sigma', 'abc')

        assert plugin.get_parameters()['salt_probability'] == 0.3
        assert plugin.get_parameters()['sigma'] == 0.0

    def test_seed_makes_output_reproducible(self, plugin, test_frame):
        plugin.update_parameter('sigma', 30)
        plugin.update_parameter('seed', 42)

        assert np.array_equal(plugin.process_frame(test_frame), plugin.process_frame(test_frame))

    def test_process_frame_with_rng(self, plugin, test_frame):
        plugin.update_parameter('sigma', 30)

        first = plugin.process_frame(test_frame, rng=np.random.default_rng(3))
        second = plugin.process_frame(test_frame, rng=np.random.default_rng(3))

        assert np.array_equal(first, second)

    def test_progress_callback(self, plugin, test_frame):
        calls = []
        plugin.process_frame(test_frame, progress_callback=lambda step, total: calls.append((step, total)))

        assert plugin.get_progress_steps() == 1
        assert calls == [(1, 1)]

    def test_process_empty_frame(self, plugin):
        with pytest.raises(InvalidInputError):
            plugin.process_frame(np.zeros((0, 0, 3), dtype=np.uint8))


class TestParameterBinding:
    """Listener werden bei Parameter-Änderungen benachrichtigt"""

    @pytest.fixture
    def plugin(self):
        return AddNoiseEffect()

    def test_listener_receives_updates(self, plugin):
        events = []
        plugin.add_parameter_listener(lambda name, value: events.append((name, value)))

        plugin.update_parameter('mean', 4)
        plugin.update_parameter('noise_type', 'Salt_Pepper')

        assert events == [('mean', 4.0), ('noise_type', 'Salt_Pepper')]

    def test_listener_not_called_on_failure(self, plugin):
        events = []
        plugin.add_parameter_listener(lambda name, value: events.append(name))

        plugin.update_parameter('unknown', 1)
        with pytest.raises(InvalidInputError):
            plugin.update_parameter('sigma', -5)

        assert events == []

    def test_listener_registered_once(self, plugin):
        events = []

        def listener(name, value):
            events.append(name)

        plugin.add_parameter_listener(listener)
        plugin.add_parameter_listener(listener)
        plugin.update_parameter('sigma', 1)

        assert events == ['sigma']

    def test_remove_listener(self, plugin):
        events = []

        def listener(name, value):
            events.append(name)

        plugin.add_parameter_listener(listener)
        assert plugin.remove_parameter_listener(listener)
        assert not plugin.remove_parameter_listener(listener)

        plugin.update_parameter('sigma', 1)
        assert events == []

    def test_failing_listener_does_not_break_update(self, plugin):
        events = []

        def broken(name, value):
            raise RuntimeError("UI gone")

        plugin.add_parameter_listener(broken)
        plugin.add_parameter_listener(lambda name, value: events.append(name))

        assert plugin.update_parameter('sigma', 3)
        assert plugin.get_parameters()['sigma'] == 3.0
        assert events == ['sigma']

    def test_cleanup_detaches_listeners(self, plugin):
        events = []
        plugin.add_parameter_listener(lambda name, value: events.append(name))

        plugin.cleanup()
        plugin.update_parameter('sigma', 1)

        assert events == []


class TestParamMap:
    """Host String-Map über das Plugin"""

    def test_set_param_map(self):
        plugin = AddNoiseEffect(config={'seed': 8})
        plugin.set_param_map({
            'm_noiseType': 'Gaussian',
            'sigma': '5',
            'mean': '2',
            'm_salt_p': '0',
            'm_pepper_p': '0'
        })

        assert plugin.get_parameters()['sigma'] == 5.0
        assert plugin.get_parameters()['mean'] == 2.0
        assert plugin.get_parameters()['seed'] == 8

    def test_get_param_map(self):
        plugin = AddNoiseEffect(config={'noise_type': 'Salt_Pepper', 'salt_probability': 0.5})

        param_map = plugin.get_param_map()

        assert param_map['m_noiseType'] == 'Salt_Pepper'
        assert float(param_map['m_salt_p']) == 0.5

    def test_invalid_param_map_keeps_config(self):
        plugin = AddNoiseEffect(config={'sigma': 7})

        with pytest.raises(InvalidInputError):
            plugin.set_param_map({'m_noiseType': 'Gaussian', 'sigma': 'x', 'mean': '0',
                                  'm_salt_p': '0', 'm_pepper_p': '0'})

        assert plugin.get_parameters()['sigma'] == 7.0

    def test_set_param_map_notifies_changed_fields(self):
        plugin = AddNoiseEffect(config={'sigma': 5})
        events = []
        plugin.add_parameter_listener(lambda name, value: events.append((name, value)))

        plugin.set_param_map({
            'm_noiseType': 'Salt_Pepper',
            'sigma': '5',
            'mean': '0',
            'm_salt_p': '0.1',
            'm_pepper_p': '0'
        })

        assert events == [('noise_type', 'Salt_Pepper'), ('salt_probability', 0.1)]

    def test_invalid_param_map_does_not_notify(self):
        plugin = AddNoiseEffect()
        events = []
        plugin.add_parameter_listener(lambda name, value: events.append(name))

        with pytest.raises(InvalidInputError):
            plugin.set_param_map({'m_noiseType': 'Gaussian', 'sigma': '-1', 'mean': '0',
                                  'm_salt_p': '0', 'm_pepper_p': '0'})

        assert events == []
