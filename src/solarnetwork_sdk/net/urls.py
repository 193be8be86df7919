"""
URL query string helpers
"""

from typing import Any, Callable, Dict, Mapping, Optional, Set
from urllib.parse import quote, unquote


def url_query_parse(search: Optional[str], multi_value_keys: Optional[Set[str]] = None) -> Dict[str, Any]:
    """
    Parse a URL query string into a parameter dictionary.
    
    Pairs are split on ``&`` and then on the first ``=``; pairs without an
    ``=`` are ignored. Keys and values are percent-decoded. A key that
    appears more than once maps to a list of its values.
    
    Args:
        search: The query portion of a URL, optionally with a leading ``?``
        multi_value_keys: Keys that should always map to a list, even with
            a single value
        
    Returns:
        dict: The parsed parameters, in order of first appearance
    """
    params: Dict[str, Any] = {}
    if not search:
        return params
    if search.startswith('?'):
        search = search[1:]
    for pair in search.split('&'):
        if '=' not in pair:
            continue
        raw_key, raw_value = pair.split('=', 1)
        key = unquote(raw_key)
        value = unquote(raw_value)
        if key in params:
            if not isinstance(params[key], list):
                params[key] = [params[key]]
            params[key].append(value)
        elif multi_value_keys and key in multi_value_keys:
            params[key] = [value]
        else:
            params[key] = value
    return params


def url_query_encode(
    parameters: Optional[Mapping[str, Any]],
    encoder: Optional[Callable[[str], str]] = None
) -> str:
    """
    Encode a parameter mapping as a URL query string.
    
    List and tuple values are encoded as repeated parameters.
    
    Args:
        parameters: Mapping of parameter names to values
        encoder: Optional function to encode each component; defaults to
            percent-encoding with no safe characters
        
    Returns:
        str: The encoded query string, without a leading ``?``
    """
    if not parameters:
        return ""
    encode = encoder or (lambda s: quote(s, safe=''))
    pairs = []
    for key, value in parameters.items():
        items = value if isinstance(value, (list, tuple)) else [value]
        for item in items:
            pairs.append(f"{encode(str(key))}={encode(str(item))}")
    return '&'.join(pairs)
