"""
Test Logging - Import richtet kein Logging beim Host ein
"""
import json
import logging
import os
import subprocess
import sys
import textwrap

import pytest

SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))

IMPORT_SCRIPT = textwrap.dedent("""
    import json
    import logging

    root = logging.getLogger()
    before = [type(h).__name__ for h in root.handlers]

    import addnoise
    import addnoise.synthesizer
    from addnoise import get_plugin_manager
    get_plugin_manager()

    print(json.dumps({
        'before': before,
        'after': [type(h).__name__ for h in root.handlers],
        'level': root.level,
    }))
""")


@pytest.fixture
def clean_env():
    env = dict(os.environ)
    env.pop('ADDNOISE_LOG_DIR', None)
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [SRC_DIR, env.get('PYTHONPATH')]))
    return env


class TestImportSideEffects:

    def test_import_leaves_root_logger_alone(self, tmp_path, clean_env):
        completed = subprocess.run([sys.executable, '-c', IMPORT_SCRIPT], cwd=str(tmp_path),
                                   env=clean_env, capture_output=True, text=True, check=True)

        state = json.loads(completed.stdout.strip().splitlines()[-1])

        assert state['after'] == state['before'] == []
        assert state['level'] == logging.WARNING
        assert not (tmp_path / 'logs').exists()
        assert list(tmp_path.iterdir()) == []


class TestSetupLogging:

    @pytest.fixture
    def app_logger(self):
        from addnoise.logger import AddNoiseLogger
        root = logging.getLogger()
        level = root.level
        app_logger = AddNoiseLogger()
        yield app_logger
        root.setLevel(level)
        for handler in (app_logger.file_handler, app_logger.console_handler):
            root.removeHandler(handler)
            handler.close()

    def test_setup_creates_log_file(self, tmp_path, app_logger):
        app_logger.setup_logging(log_dir=str(tmp_path / 'logs'), console_level=logging.ERROR)

        assert app_logger.log_file.exists()
        assert app_logger.get_console_log_level() == logging.ERROR
        assert app_logger.file_handler in logging.getLogger().handlers

    def test_old_logs_are_cleaned_up(self, tmp_path, app_logger):
        log_dir = tmp_path / 'logs'
        log_dir.mkdir()
        for i in range(3):
            (log_dir / f'addnoise_2020010{i}_000000.log').write_text('alt')
        (log_dir / 'host.log').write_text('fremd')

        app_logger.setup_logging(log_dir=str(log_dir), max_log_files=1)

        assert len(list(log_dir.glob('addnoise_2020*.log'))) == 1
        assert (log_dir / 'host.log').exists()

    def test_console_level_helpers(self, tmp_path, app_logger):
        from addnoise.logger import set_console_log_level, get_console_log_level
        app_logger.setup_logging(log_dir=str(tmp_path / 'logs'))

        set_console_log_level(logging.DEBUG)

        assert get_console_log_level() == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
