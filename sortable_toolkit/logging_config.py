from __future__ import annotations

"""Central logging configuration for Sortable Toolkit.

Import and call :func:`setup_logging` at application start-up.
"""

import logging
import logging.config
import os

from sortable_toolkit.config import ConfigManager

__all__ = ["setup_logging", "EDITING_LOGGER"]

EDITING_LOGGER = "sortable_toolkit.core.services.outline_editing_service"

_TRUTHY = {"1", "true", "yes", "on"}


def setup_logging() -> None:
    """Configure logging for the application using configuration from YAML files."""
    log_dir = os.environ.get("SORTABLE_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    logging_config = dict(ConfigManager().get_logging_config())
    if logging_config.get("version"):
        handlers = dict(logging_config.get("handlers") or {})
        if "file" in handlers:
            handlers["file"] = {**handlers["file"], "filename": log_file}
        logging_config["handlers"] = handlers
        try:
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _setup_minimal_logging()
            logging.error("Invalid logging config, using minimal fallback: %s", exc)
    else:
        _setup_minimal_logging()
        logging.warning("===== Logging initialised with minimal fallback (no config) =====")

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up console-only logging when config is unavailable."""
    minimal_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "simple": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "simple",
                "level": "INFO",
            },
        },
        "root": {
            "level": "INFO",
            "handlers": ["console"],
        },
        # Keep an entry for the editing service so env overrides can flip it
        "loggers": {
            EDITING_LOGGER: {
                "handlers": ["console"],
                "level": "INFO",
                "propagate": False,
            }
        },
    }
    logging.config.dictConfig(minimal_config)


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - SORTABLE_DEBUG_REORDER=true  -> DEBUG for the editing service and reorder engine
    - SORTABLE_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_reorder = os.environ.get("SORTABLE_DEBUG_REORDER", "").strip().lower() in _TRUTHY
    extra_modules = os.environ.get("SORTABLE_DEBUG_MODULES", "").strip()
    targets = []
    if debug_reorder:
        targets.append(EDITING_LOGGER)
        targets.append("sortable_toolkit.core.reorder")
    if extra_modules:
        targets.extend(m.strip() for m in extra_modules.split(",") if m.strip())

    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        if not any(h.level <= logging.DEBUG for h in logger.handlers):
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
