"""
Utility modules for the spec gateway
"""

from .config import GatewayConfig, get_gateway_config
from .logger import setup_logging

__all__ = [
    "GatewayConfig",
    "get_gateway_config",
    "setup_logging"
]
