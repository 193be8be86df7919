"""
Exception classes for SolarNetwork Python SDK
"""

from typing import Optional, Dict, Any


class SolarNetworkSDKError(Exception):
    """Base exception for all SolarNetwork SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ValidationError(SolarNetworkSDKError):
    """Exception raised for validation failures"""
    pass


class ConfigurationError(SolarNetworkSDKError):
    """Exception raised when environment configuration cannot be loaded"""
    pass
