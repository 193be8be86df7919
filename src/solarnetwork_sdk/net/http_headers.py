"""
HTTP header and method definitions
"""

from enum import Enum

from ..util.multimap import MultiMap


class HttpMethod(str, Enum):
    """HTTP methods (verbs)"""
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"


class HttpContentType(str, Enum):
    """Common HTTP ``Content-Type`` values"""
    APPLICATION_JSON = "application/json"
    APPLICATION_JSON_UTF8 = "application/json; charset=UTF-8"
    FORM_URLENCODED = "application/x-www-form-urlencoded"
    FORM_URLENCODED_UTF8 = "application/x-www-form-urlencoded; charset=UTF-8"


class HttpHeaders(MultiMap):
    """
    HTTP headers multi-map

    Header names are always compared case-insensitively.
    """

    ACCEPT = "Accept"
    AUTHORIZATION = "Authorization"
    CONTENT_MD5 = "Content-MD5"
    CONTENT_TYPE = "Content-Type"
    DATE = "Date"
    DIGEST = "Digest"
    HOST = "Host"
    X_SN_PRE_SIGNED_AUTHORIZATION = "X-SN-PreSignedAuthorization"
    X_SN_DATE = "X-SN-Date"

    def __init__(self, values=None):
        super().__init__(values, case_insensitive=True)
