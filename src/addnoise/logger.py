"""
Zentrales Logging-System für AddNoise
"""
import logging
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler

from .constants import (
    DEFAULT_LOG_DIR,
    DEFAULT_MAX_LOG_FILES,
    LOG_FILE_PREFIX,
    LOG_MAX_BYTES,
    LOG_BACKUP_COUNT,
)

# Log-Verzeichnis kann per Umgebungsvariable überschrieben werden (z.B. in Tests)
LOG_DIR_ENV = 'ADDNOISE_LOG_DIR'


class AddNoiseLogger:
    """
    Zentraler Logger mit Datei- und Konsolen-Ausgabe.

    Handler werden erst durch setup_logging() am Root-Logger registriert,
    beim Import des Pakets passiert nichts.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(AddNoiseLogger, cls).__new__(cls)
        return cls._instance

    def _cleanup_old_logs(self, log_dir, max_files=DEFAULT_MAX_LOG_FILES):
        """
        Löscht alte Log-Dateien, behält nur die neuesten.

        Args:
            log_dir: Pfad zum Log-Verzeichnis
            max_files: Maximale Anzahl Log-Dateien (0 = unbegrenzt)
        """
        if max_files == 0:
            return

        log_files = sorted(
            log_dir.glob(f'{LOG_FILE_PREFIX}_*.log*'),
            key=lambda f: f.stat().st_mtime,
            reverse=True
        )

        for old_file in log_files[max_files:]:
            try:
                old_file.unlink()
            except OSError as e:
                logging.getLogger(__name__).warning(f"Konnte {old_file.name} nicht löschen: {e}")

    def setup_logging(self, log_dir=DEFAULT_LOG_DIR, log_level=logging.INFO,
                      console_level=logging.WARNING, max_log_files=DEFAULT_MAX_LOG_FILES):
        """
        Richtet das Logging-System ein.

        Args:
            log_dir: Verzeichnis für Log-Dateien
            log_level: Logging-Level für Datei (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            console_level: Logging-Level für Konsole (Standard: WARNING)
            max_log_files: Maximale Anzahl Log-Dateien (0 = unbegrenzt)
        """
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        self._cleanup_old_logs(log_path, max_files=max_log_files)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = log_path / f'{LOG_FILE_PREFIX}_{timestamp}.log'

        root_logger = logging.getLogger()
        root_logger.setLevel(min(log_level, console_level))

        # Nur eigene Handler ersetzen
        for handler in (getattr(self, 'file_handler', None), getattr(self, 'console_handler', None)):
            if handler is not None:
                root_logger.removeHandler(handler)
                handler.close()

        detailed_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(levelname)-8s | %(name)s | %(message)s'
        )

        # Datei-Handler mit Rotation
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(console_formatter)

        self.console_handler = console_handler
        self.file_handler = file_handler
        self.log_file = log_file

        # Startup-Log (nur in Datei, Console-Handler kommt danach)
        root_logger.info("=" * 80)
        root_logger.info("AddNoise gestartet")
        root_logger.info(f"Log-Datei: {log_file}")
        root_logger.info("=" * 80)
        root_logger.addHandler(console_handler)

    def set_console_log_level(self, level):
        """
        Ändert das Log-Level für die Konsolen-Ausgabe.

        Args:
            level: logging.DEBUG, logging.INFO, logging.WARNING, etc.
        """
        if hasattr(self, 'console_handler'):
            self.console_handler.setLevel(level)
            root_logger = logging.getLogger()
            if level < root_logger.level:
                root_logger.setLevel(level)
            logging.getLogger('addnoise.logger').debug(
                f"Console-Log-Level auf {logging.getLevelName(level)} gesetzt"
            )

    def get_console_log_level(self):
        """
        Gibt das aktuelle Console-Log-Level zurück.

        Returns:
            int: Aktuelles Log-Level (z.B. logging.WARNING)
        """
        if hasattr(self, 'console_handler'):
            return self.console_handler.level
        return logging.WARNING


def get_logger(name):
    """
    Convenience-Funktion zum Holen eines Loggers.

    Args:
        name: Name des Loggers (meist __name__)

    Returns:
        logging.Logger: Logger (Handler richtet nur die Anwendung ein)
    """
    return logging.getLogger(name)


def set_console_log_level(level):
    """Ändert das Console-Log-Level."""
    AddNoiseLogger().set_console_log_level(level)


def get_console_log_level():
    """Gibt das aktuelle Console-Log-Level zurück."""
    return AddNoiseLogger().get_console_log_level()


def log_performance(logger, operation, duration_ms):
    """
    Loggt Performance-Metriken.

    Args:
        logger: Logger-Instanz
        operation: Name der Operation
        duration_ms: Dauer in Millisekunden
    """
    if duration_ms > 1000:
        logger.warning(f"Performance: {operation} dauerte {duration_ms:.2f}ms (>1s)")
    else:
        logger.debug(f"Performance: {operation} dauerte {duration_ms:.2f}ms")
