from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional

import yaml

from modelstore.config import DEFAULT_CONFIG_PATH


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for the application.

    Establishes an early NOTSET basic config so the storage config can be
    read, then reconfigures the root logger at the configured `log_level`
    (WARNING when absent or unreadable). Returns a module logger.
    """
    logging.basicConfig(level=logging.NOTSET, format='%(asctime)s INFO %(message)s')
    level = logging.WARNING

    cfg_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as f:
                cfg = yaml.safe_load(f) or {}
            name = cfg.get('log_level') if isinstance(cfg, dict) else None
            if isinstance(name, str) and isinstance(getattr(logging, name.upper(), None), int):
                level = getattr(logging, name.upper())
        except (OSError, yaml.YAMLError):
            logging.exception('Failed to read log level from %s', cfg_path)

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
    logger.info("Log level set to %s", logging.getLevelName(level))

    return logger
