"""
Network environment configuration

Provides the host, protocol and port settings used when building and
signing SolarNetwork API requests, with loaders for JSON documents.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import urlsplit

from ..exceptions import ConfigurationError, ValidationError

DEFAULT_HOST = "data.solarnetwork.net"
DEFAULT_PROTOCOL = "https"


def normalized_protocol(value: Optional[str]) -> str:
    """
    Normalize a protocol value, removing any trailing colon.
    
    Args:
        value: Protocol such as ``https`` or ``https:``
        
    Returns:
        str: The normalized protocol, ``https`` if not provided
    """
    if not value:
        return DEFAULT_PROTOCOL
    return value[:-1] if value.endswith(':') else value


def default_port(protocol: str) -> int:
    """Get the implied port for a protocol."""
    return 443 if protocol in ('https', 'wss') else 80


@dataclass
class Environment:
    """
    Network environment configuration
    
    Attributes:
        host: The host name
        protocol: The protocol, ``https`` or ``http``
        port: The port; defaults to the implied port of ``protocol``
        proxy_url_prefix: Optional proxy URL prefix, for example
            ``https://query.solarnetwork.net/1m``
        extra: Arbitrary additional properties
    """
    host: str = DEFAULT_HOST
    protocol: str = DEFAULT_PROTOCOL
    port: Optional[int] = None
    proxy_url_prefix: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    
    def __post_init__(self):
        """Normalize values after initialization"""
        self.host = self.host or DEFAULT_HOST
        self.protocol = normalized_protocol(self.protocol)
        if self.port is None or self.port == '':
            self.port = default_port(self.protocol)
        else:
            try:
                self.port = int(self.port)
            except (TypeError, ValueError):
                raise ValidationError(
                    f"Invalid port value: {self.port!r}",
                    "INVALID_PORT",
                    {"port": self.port}
                )
    
    def use_tls(self) -> bool:
        """Test if TLS is in use via the ``https`` protocol."""
        return self.protocol == 'https'
    
    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.extra)
        result.update({
            "host": self.host,
            "protocol": self.protocol,
            "port": self.port,
        })
        if self.proxy_url_prefix:
            result["proxy_url_prefix"] = self.proxy_url_prefix
        return result
    
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Environment':
        """
        Create an environment from a mapping.
        
        The ``hostname`` key is preferred over ``host``, so objects shaped like
        a parsed URL can be used directly. Unknown keys are kept in ``extra``.
        
        Args:
            data: Mapping of configuration properties
            
        Returns:
            Environment: The normalized environment
        """
        known = {'host', 'hostname', 'protocol', 'port', 'proxy_url_prefix', 'proxyUrlPrefix'}
        return cls(
            host=data.get('hostname') or data.get('host') or DEFAULT_HOST,
            protocol=data.get('protocol'),
            port=data.get('port'),
            proxy_url_prefix=data.get('proxy_url_prefix') or data.get('proxyUrlPrefix'),
            extra={k: v for k, v in data.items() if k not in known}
        )
    
    @classmethod
    def from_url(cls, url: str) -> 'Environment':
        """Create an environment from the scheme, host and port of a URL."""
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment URL: {e}", "INVALID_URL", {"url": url})
        if not parts.hostname:
            raise ConfigurationError(f"Environment URL has no host: {url}", "INVALID_URL", {"url": url})
        return cls(host=parts.hostname, protocol=parts.scheme, port=port)


def load_environment_from_json(json_string: str, name: Optional[str] = None) -> Environment:
    """
    Load an environment from a JSON document.
    
    The document is either a single environment object, or an object with an
    ``environments`` mapping of named environments plus an optional
    ``default`` name.
    
    Args:
        json_string: The JSON document
        name: Optional name of the environment to select
        
    Returns:
        Environment: The loaded environment
        
    Raises:
        ConfigurationError: If the document cannot be parsed or the named
            environment is not present
    """
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Failed to parse environment JSON: {e}", "PARSE_ERROR")
    
    if not isinstance(data, dict):
        raise ConfigurationError("Environment configuration must be a JSON object", "INVALID_FORMAT")
    
    if 'environments' in data:
        environments = data['environments']
        selected = name or data.get('default')
        if not isinstance(environments, dict) or selected not in environments:
            raise ConfigurationError(
                f"Environment '{selected}' not found",
                "ENVIRONMENT_NOT_FOUND",
                {"environment": selected}
            )
        data = environments[selected]
    elif name is not None:
        raise ConfigurationError(f"Environment '{name}' not found", "ENVIRONMENT_NOT_FOUND", {"environment": name})
    
    try:
        return Environment.from_dict(data)
    except (AttributeError, TypeError) as e:
        raise ConfigurationError(f"Invalid environment configuration: {e}", "INVALID_FORMAT")


def load_environment_from_file(file_path: Union[str, Path], name: Optional[str] = None) -> Environment:
    """Load an environment from a JSON file."""
    try:
        with open(Path(file_path), 'r', encoding='utf-8') as f:
            json_string = f.read()
    except OSError as e:
        raise ConfigurationError(f"Failed to read environment file: {e}", "FILE_ERROR")
    return load_environment_from_json(json_string, name)
