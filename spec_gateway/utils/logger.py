"""
Logging utilities for the spec gateway

Configures the standard library logging tree and structlog on top of it.
"""

import copy
import logging
import logging.config
import os
import sys
from typing import Any, Dict, Optional

import structlog
import yaml

# Records arrive already rendered by structlog, so handlers only print the message
DEFAULT_LOGGING_CONFIG: Dict[str, Any] = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {
            'format': '%(message)s'
        },
        'default': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'level': 'INFO',
            'formatter': 'plain',
            'stream': 'ext://sys.stdout'
        }
    },
    'root': {
        'level': 'INFO',
        'handlers': ['console']
    }
}


def load_logging_config(config_path: Optional[str]) -> Dict[str, Any]:
    """
    Load a dictConfig mapping from a YAML file, or return the default one

    Args:
        config_path: Path to a YAML logging configuration file

    Returns:
        A dictConfig-compatible mapping
    """
    if config_path and os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
            if isinstance(config, dict):
                return config
            print(f"Logging config {config_path} is not a mapping, using defaults", file=sys.stderr)
        except (OSError, yaml.YAMLError) as e:
            print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
    return copy.deepcopy(DEFAULT_LOGGING_CONFIG)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    config_path: Optional[str] = None
) -> None:
    """
    Setup stdlib logging and structlog

    Args:
        log_level: Minimum level for the root logger and its handlers
        log_format: 'json' for one JSON object per line, 'console' for human-readable output
        config_path: Optional YAML dictConfig file replacing the default handlers
    """
    level = log_level.upper()
    config = load_logging_config(config_path)

    for handler_config in config.get('handlers', {}).values():
        handler_config['level'] = level
    config.setdefault('root', {})['level'] = level

    logging.config.dictConfig(config)

    if log_format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.format_exc_info,
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
