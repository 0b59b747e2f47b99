# utils.py
"""
Utility functions for the simulation framework.

Configuration loading and logging setup live here: they are used by the
entry point and the tests but belong to neither the physics nor the
rendering.
"""
import logging
import logging.handlers
import copy
import json
import os
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# load_config(path: str) -> Dict[str, Any]:
#   - Inputs: path to a JSON file whose top level is an object of sections.
#   - Outputs: DEFAULT_CONFIG with each section updated by the file's
#     section of the same name. Unknown sections are kept and warned about.
#   - Errors: FileNotFoundError and json.JSONDecodeError are logged and
#     re-raised; a non-object top level or section raises ValueError.
#
# setup_logging(config: Dict[str, Any]) -> Optional[str]:
#   - Inputs: A config dictionary; only its "logging" section is read
#     ("level", "format", "log_file"). A null "log_file" disables the file.
#   - Outputs: The log file path in use, or None.
#   - Side Effects: Replaces (and closes) every root logger handler with a
#     console handler and, unless disabled, a rotating file handler.
#     Creates the log directory if it doesn't exist.

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(levelname)s - %(message)s',
        'log_file': 'logs/simulation.log',
    },
    'simulation_parameters': {},
    'run_control': {},
    'visualization': {},
}

# Rotate at 1MB, keep 5 backups.
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5


def load_config(path: str) -> Dict[str, Any]:
    """Loads a JSON configuration file on top of the built-in defaults."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            loaded = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError:
        logging.error(f"Error decoding JSON from {path}.")
        raise

    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration in {path} must be a JSON object, got {type(loaded).__name__}.")

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in loaded.items():
        if not isinstance(values, dict):
            raise ValueError(f"Configuration section '{section}' in {path} must be a JSON object.")
        if section not in config:
            logging.warning(f"Unknown configuration section '{section}' in {path}.")
            config[section] = {}
        config[section].update(values)

    logging.info("Configuration loaded successfully.")
    return config


def setup_logging(config: Dict[str, Any]) -> Optional[str]:
    """
    Configures the root logger from the "logging" config section.

    Logs go to the console and, unless "log_file" is null, to a rotating file.
    """
    log_config = {**DEFAULT_CONFIG['logging'], **config.get('logging', {})}
    log_level = str(log_config['level']).upper()
    log_file_path = log_config['log_file']

    root = logging.getLogger()
    root.setLevel(log_level)

    # Avoid duplicated output when called more than once.
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.StreamHandler()]

    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        ))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level set to {log_level}.")
    logging.debug(f"Log file path: {log_file_path}")
    return log_file_path
