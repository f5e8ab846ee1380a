"""
Fulfillment External Integrations
=================================

SLA policy loading from the admin-editable YAML file, with hot reload
via watchdog.
"""

import threading
from pathlib import Path
from typing import Optional

import yaml
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from core import ConfigurationException
from fulfillment.application import ISLAConfigProvider
from fulfillment.domain import SLAConfig
from shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ConfigFileHandler(FileSystemEventHandler):
    """Watchdog event handler for SLA config file changes."""

    def __init__(self, config_manager: "SLAConfigManager", config_path: Path):
        self.config_manager = config_manager
        self.config_path = config_path
        super().__init__()

    def on_modified(self, event):
        if event.is_directory:
            return
        if Path(event.src_path).resolve() == self.config_path.resolve():
            logger.info("SLA config file changed", extra={"path": str(event.src_path)})
            self.config_manager.reload()

    on_created = on_modified

    def on_moved(self, event):
        # Editors that save via rename land the new content at dest_path.
        if event.is_directory:
            return
        if Path(event.dest_path).resolve() == self.config_path.resolve():
            logger.info("SLA config file replaced", extra={"path": str(event.dest_path)})
            self.config_manager.reload()


class SLAConfigManager(ISLAConfigProvider):
    """
    Thread-safe SLA configuration holder with hot-reload support.

    A missing file means "defaults for everything". A file that fails to
    parse on reload keeps the last good configuration.
    """

    def __init__(self):
        self._config: Optional[SLAConfig] = None
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    def load(self, path: Path) -> SLAConfig:
        """
        Initial configuration load.

        An unreadable or malformed file starts the service on defaults,
        the same way a failed reload keeps the last good configuration.
        """
        self._path = Path(path)
        try:
            config = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to load SLA config, using defaults", extra={"error": str(e)})
            config = SLAConfig()
        with self._lock:
            self._config = config
        return config

    def _load_from_file(self, path: Path) -> SLAConfig:
        """Load and parse the YAML policy file."""
        if not path.exists():
            logger.warning("SLA config file not found, using defaults", extra={"path": str(path)})
            return SLAConfig()

        with open(path, "r") as f:
            data = yaml.safe_load(f)

        return SLAConfig.from_mapping(data)

    def reload(self) -> bool:
        """Reload configuration from file."""
        if self._path is None:
            return False

        try:
            new_config = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError) as e:
            logger.error("Failed to reload SLA config, keeping previous", extra={"error": str(e)})
            return False

        with self._lock:
            self._config = new_config
        logger.info("SLA configuration reloaded")
        return True

    def start_watching(self) -> None:
        """
        Start watching the configuration file's directory for changes.

        Skipped when the directory does not exist or the platform has no
        file-watching support (some containers).
        """
        if self._path is None:
            raise ConfigurationException("SLA config not loaded. Call load() first.")

        directory = self._path.resolve().parent
        if not directory.exists():
            logger.info("SLA config directory missing, not watching", extra={"path": str(directory)})
            return

        try:
            self._observer = Observer()
            self._observer.schedule(
                ConfigFileHandler(self, self._path),
                str(directory),
                recursive=False
            )
            self._observer.start()
            logger.info("Watching SLA config file", extra={"path": str(self._path)})
        except OSError as e:
            logger.warning("File watching not available, using static config", extra={"error": str(e)})
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    @property
    def config(self) -> SLAConfig:
        """Current configuration."""
        with self._lock:
            if self._config is None:
                raise ConfigurationException("SLA configuration not loaded")
            return self._config

    def get_config(self) -> SLAConfig:
        return self.config
