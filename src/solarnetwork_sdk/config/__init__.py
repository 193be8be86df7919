"""
Configuration management for SolarNetwork Python SDK

This module provides the network environment configuration used to render
the signed ``Host`` header, and loaders for JSON configuration documents.
"""

from .environment import (
    Environment,
    DEFAULT_HOST,
    DEFAULT_PROTOCOL,
    default_port,
    normalized_protocol,
    load_environment_from_json,
    load_environment_from_file,
)

__all__ = [
    'Environment',
    'DEFAULT_HOST',
    'DEFAULT_PROTOCOL',
    'default_port',
    'normalized_protocol',
    'load_environment_from_json',
    'load_environment_from_file',
]
