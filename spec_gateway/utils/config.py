"""
Configuration Management
Environment-based configuration for the spec store, server, logging and CORS
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class GatewayConfig(BaseSettings):
    """Gateway Configuration"""

    # Service info
    service_name: str = "spec-gateway"
    service_version: str = "1.0.0"

    # Spec store
    specs_dir: str = "./data/specs"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080
    shutdown_timeout: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"
    log_config_path: Optional[str] = None

    # CORS (comma-separated lists)
    cors_allowed_origins: str = "*"
    cors_allowed_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allowed_headers: str = "Content-Type,Authorization"
    cors_max_age: int = 86400

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False
    )

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError('Port must be between 1 and 65535')
        return v

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        v = v.lower()
        if v not in ("json", "console"):
            raise ValueError("Log format must be 'json' or 'console'")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        return v.upper()

    @staticmethod
    def _split(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    def get_cors_origins(self) -> List[str]:
        return self._split(self.cors_allowed_origins)

    def get_cors_methods(self) -> List[str]:
        return self._split(self.cors_allowed_methods)

    def get_cors_headers(self) -> List[str]:
        return self._split(self.cors_allowed_headers)

    def log_config(self):
        """Log the effective configuration"""
        logger.info("Specs directory", specs_dir=self.specs_dir)
        logger.info("Listen address", host=self.host, port=self.port)
        logger.info("Logging", level=self.log_level, format=self.log_format,
                    config_path=self.log_config_path)
        logger.info("CORS", origins=self.get_cors_origins(),
                    methods=self.get_cors_methods(), max_age=self.cors_max_age)


_gateway_config: Optional[GatewayConfig] = None


def get_gateway_config() -> GatewayConfig:
    """Get gateway configuration instance"""
    global _gateway_config
    if _gateway_config is None:
        _gateway_config = GatewayConfig()
    return _gateway_config
