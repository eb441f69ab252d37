"""
Micropub endpoint entry point.

Configures logging, loads config.yml, builds the content store and runs the
Flask app inside an embedded Gunicorn server.

Logging is described once by logging_config() and applied twice: by
configure_logging() at startup, and by Gunicorn's own logging setup through
logconfig_dict. Both give the root logger a stdout handler and a rotating
micropub.log file at INFO, or DEBUG in debug mode.

Example:
    Run via console script:
        $ micropub-server
        $ MICROPUB_DEBUG=true micropub-server
"""
import logging
import logging.config
import os
import sys
from typing import Any, Dict

from gunicorn.app.base import BaseApplication

from config import load_config


logger = logging.getLogger(__name__)

LOG_FILE = "micropub.log"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
GUNICORN_CONFIG = os.path.join(os.path.dirname(__file__), "gunicorn_config.py")


def logging_config(debug: bool = False, log_file: str = LOG_FILE) -> Dict[str, Any]:
    """Build the dictConfig for the application and Gunicorn loggers.

    Args:
        debug: Log at DEBUG instead of INFO
        log_file: Path of the rotating log file (10MB x 3)
    """
    level = "DEBUG" if debug else "INFO"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "micropub": {"format": LOG_FORMAT},
        },
        "handlers": {
            "stdout": {"class": "logging.StreamHandler", "formatter": "micropub", "stream": "ext://sys.stdout"},
            "stderr": {"class": "logging.StreamHandler", "formatter": "micropub", "stream": "ext://sys.stderr"},
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "formatter": "micropub",
                "filename": log_file,
                "maxBytes": 10 * 1024 * 1024,
                "backupCount": 3,
            },
        },
        "root": {"level": level, "handlers": ["stdout", "file"]},
        "loggers": {
            "gunicorn.access": {"level": "INFO", "handlers": ["stdout"], "propagate": False},
            "gunicorn.error": {"level": level, "handlers": ["stderr", "file"], "propagate": False},
        },
    }


def configure_logging(debug: bool = False, log_file: str = LOG_FILE) -> None:
    """Send logs to a rotating file and stdout."""
    logging.config.dictConfig(logging_config(debug, log_file))


class MicropubApplication(BaseApplication):
    """Gunicorn application serving an already-built Flask app."""

    def __init__(self, app, config_file: str = GUNICORN_CONFIG, debug: bool = False,
                 log_file: str = LOG_FILE):
        self.application = app
        self.config_file = config_file
        self.debug = debug
        self.log_file = log_file
        super().__init__()

    def load_config(self):
        settings = {}
        with open(self.config_file, "r") as f:
            exec(f.read(), settings)

        for key, value in settings.items():
            if key in self.cfg.settings and value is not None:
                self.cfg.set(key.lower(), value)

        self.cfg.set("logconfig_dict", logging_config(self.debug, self.log_file))

        if self.debug:
            self.cfg.set("timeout", 0)
            self.cfg.set("loglevel", "debug")

    def load(self):
        return self.application


def debug_requested() -> bool:
    """True when MICROPUB_DEBUG is set or --debug was passed."""
    if os.environ.get("MICROPUB_DEBUG", "").lower() in ("true", "1", "yes"):
        return True
    return "--debug" in sys.argv[1:]


def main(debug: bool = False) -> None:
    """Entry point for the micropub-server console script."""
    from server.server import create_app
    from store import SQLiteContentStore

    debug = debug or debug_requested()
    configure_logging(debug)
    if debug:
        logger.info("Debug mode enabled: worker timeout disabled")

    config = load_config()
    store = SQLiteContentStore.from_config(config)
    logger.info(f"Storing posts in {store.db_path}, published under {store.base_url}")

    MicropubApplication(create_app(store, config=config), debug=debug).run()


if __name__ == "__main__":
    main()
