"""
Spec Store
Loads service OpenAPI documents and their embedded proxy configs into memory
"""

import json
import os
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError
import structlog

from spec_gateway.models.proxy import ServiceConfig

logger = structlog.get_logger(__name__)

PROXY_CONFIG_FIELD = "x-proxy-config"
DOCUMENT_EXTENSIONS = (".json",)


class SpecStoreError(Exception):
    """Base spec store exception"""
    pass


class DirectoryNotFound(SpecStoreError):
    """Specs directory does not exist or cannot be listed"""

    def __init__(self, specs_dir: str, reason: str = "does not exist"):
        self.specs_dir = specs_dir
        self.reason = reason
        super().__init__(f"specs directory {reason}: {specs_dir}")


class InvalidDocument(SpecStoreError):
    """A spec file is not valid JSON or carries a malformed proxy config"""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"invalid spec file {filename}: {reason}")


class NotFound(SpecStoreError):
    """No spec (or no proxy config) for the requested service"""

    def __init__(self, service_name: str, resource: str = "spec"):
        self.service_name = service_name
        self.resource = resource
        super().__init__(f"{resource} not found for service: {service_name}")


class SpecStore(ABC):
    """Read-only lookup of service specs and proxy configs"""

    @abstractmethod
    def list(self) -> List[str]:
        """Return all service names in ascending order"""

    @abstractmethod
    def get(self, service_name: str) -> bytes:
        """Return the raw spec document for a service"""

    @abstractmethod
    def get_config(self, service_name: str) -> ServiceConfig:
        """Return the proxy configuration for a service"""


class _MappingSpecStore(SpecStore):
    """Lookups over immutable name -> document / name -> config mappings"""

    def __init__(self, specs: Mapping[str, bytes], configs: Mapping[str, ServiceConfig]):
        self._specs = MappingProxyType(dict(specs))
        self._configs = MappingProxyType(dict(configs))

    def list(self) -> List[str]:
        return sorted(self._specs)

    def get(self, service_name: str) -> bytes:
        try:
            return self._specs[service_name]
        except KeyError:
            raise NotFound(service_name) from None

    def get_config(self, service_name: str) -> ServiceConfig:
        try:
            return self._configs[service_name]
        except KeyError:
            raise NotFound(service_name, resource="config") from None


class FileSpecStore(_MappingSpecStore):
    """
    Spec store backed by a directory of JSON documents

    Every ``*.json`` file in ``specs_dir`` (non-recursive) is loaded once, at
    construction. The service name is the file name without its extension.
    A single unreadable or malformed file aborts the whole load.
    """

    def __init__(self, specs_dir: str):
        self.specs_dir = specs_dir
        if not os.path.isdir(specs_dir):
            raise DirectoryNotFound(specs_dir)

        specs, configs = self._load_specs()
        super().__init__(specs, configs)

        logger.info(
            "Spec store initialized",
            specs_dir=specs_dir,
            services=len(specs),
            proxyable=len(configs)
        )

    def _load_specs(self):
        specs: Dict[str, bytes] = {}
        configs: Dict[str, ServiceConfig] = {}

        try:
            with os.scandir(self.specs_dir) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            raise DirectoryNotFound(self.specs_dir, f"cannot be read ({e})") from e

        for entry in entries:
            if entry.is_dir():
                continue
            extension = next((ext for ext in DOCUMENT_EXTENSIONS if entry.name.endswith(ext)), None)
            if extension is None:
                continue

            service_name = entry.name[:-len(extension)]
            data = self._read(entry.path, entry.name)

            config = parse_spec_document(data, entry.name)
            if config is not None:
                configs[service_name] = config
            specs[service_name] = data

            logger.debug("Loaded spec", service=service_name, proxyable=config is not None)

        return specs, configs

    @staticmethod
    def _read(path: str, filename: str) -> bytes:
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise InvalidDocument(filename, f"failed to read file: {e}") from e


def parse_spec_document(data: bytes, filename: str) -> Optional[ServiceConfig]:
    """
    Parse a spec document and extract its proxy configuration

    Args:
        data: Raw document bytes
        filename: File name, used in error messages

    Returns:
        The ServiceConfig from ``x-proxy-config``, or None when the field is absent

    Raises:
        InvalidDocument: The document is not a JSON object, or the proxy config is malformed
    """
    try:
        document = json.loads(data)
    except ValueError as e:
        raise InvalidDocument(filename, f"invalid JSON: {e}") from e

    if not isinstance(document, dict):
        raise InvalidDocument(filename, "top-level value must be a JSON object")

    if PROXY_CONFIG_FIELD not in document:
        return None

    try:
        return ServiceConfig.model_validate(document[PROXY_CONFIG_FIELD])
    except ValidationError as e:
        raise InvalidDocument(filename, f"invalid proxy config: {e}") from e


class InMemorySpecStore(_MappingSpecStore):
    """Spec store over documents and configs supplied by the caller"""

    def __init__(
        self,
        specs: Optional[Mapping[str, Union[bytes, str, Dict[str, Any]]]] = None,
        configs: Optional[Mapping[str, Union[ServiceConfig, Dict[str, Any]]]] = None
    ):
        encoded = {name: _encode_document(doc) for name, doc in (specs or {}).items()}
        validated = {
            name: cfg if isinstance(cfg, ServiceConfig) else ServiceConfig.model_validate(cfg)
            for name, cfg in (configs or {}).items()
        }
        super().__init__(encoded, validated)


def _encode_document(document: Union[bytes, str, Dict[str, Any]]) -> bytes:
    if isinstance(document, bytes):
        return document
    if isinstance(document, str):
        return document.encode("utf-8")
    return json.dumps(document).encode("utf-8")
