import hashlib
import json
from collections.abc import Mapping

from .exceptions import InvalidResponse


def to_camel_case(s):
    return s[0].lower() + s.title().replace('_', '')[1:] if s else s


def merge_recursive(base, overrides):
    """
    Merges ``overrides`` into a copy of ``base``. Mappings present on both sides are merged key by key; every other
    value in ``overrides`` replaces the one in ``base``.
    """
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_recursive(merged[key], value)
        else:
            merged[key] = value
    return merged


def json_depth(value):
    depth = 0
    stack = [(value, 1)]
    while stack:
        value, level = stack.pop()
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        depth = max(depth, level)
        stack.extend((child, level + 1) for child in children)
    return depth


def parse_json(text, depth_limit=None):
    """
    Parses a JSON document, rejecting documents nested deeper than ``depth_limit``.

    :param str text: JSON text
    :param int depth_limit: maximum nesting of arrays and objects; ``None`` or ``0`` disables the check
    :raises InvalidResponse: if the text is not JSON or is nested too deeply
    :return: the parsed value, or ``None`` for an empty document
    """
    try:
        if isinstance(text, bytes):
            text = text.decode('utf-8')

        if text is None or not text.strip():
            return None

        value = json.loads(text)
    except (ValueError, RecursionError) as e:
        # UnicodeDecodeError is a ValueError
        raise InvalidResponse('Response is not valid JSON: {}'.format(e)) from e

    if depth_limit and json_depth(value) > depth_limit:
        raise InvalidResponse('Response exceeds the maximum JSON depth of {}'.format(depth_limit))
    return value


def md5_hex(*parts):
    return hashlib.md5('\0'.join(parts).encode('utf-8')).hexdigest()


class AttributeDict(dict):
    __getattr__ = dict.__getitem__
    __setattr__ = dict.__setitem__
