"""
HTTP support for the SolarNetwork Python SDK
"""

from .http_headers import HttpHeaders, HttpMethod, HttpContentType
from .urls import url_query_parse, url_query_encode

__all__ = [
    'HttpHeaders',
    'HttpMethod',
    'HttpContentType',
    'url_query_parse',
    'url_query_encode',
]
