from collections.abc import Mapping

from werkzeug.datastructures import ImmutableDict

from .resource import Collection, Error, Resource
from .transport import MIME_TYPE_JSON, RequestsRequest
from .utils import merge_recursive

#: Default options. Every option can be overridden by the ``options`` argument of :class:`gdapi.Client`.
DEFAULTS = {
    # type name -> class, registered class name or import path; unmapped types use ``default_class``
    'classmap': {
        'collection': Collection,
        'error': Error,
    },

    # raise an APIException on errors; otherwise the error response is returned
    'throw_exceptions': True,

    # prefix for cache keys
    'cache_namespace': '',

    'default_class': Resource,

    # must implement gdapi.transport.Request
    'request_class': RequestsRequest,

    # load the schema from this file instead of the base URL
    'schema_file': '',

    'verify_ssl': True,
    'ca_cert': '',
    'ca_path': '',

    # seconds
    'connect_timeout': 5,
    'response_timeout': 300,
    'keep_alive': 120,

    'compress': True,

    # source interface for requests
    'interface': '',

    'headers': {
        'Accept': MIME_TYPE_JSON,
    },

    'follow_redirects': True,
    'max_redirects': 10,

    # the attribute that determines the class a response is mapped to
    'type_attr': 'type',

    'json_depth_limit': 50,

    'client_cert': '',
    'client_cert_key': '',

    # string or a function returning one
    'client_cert_pass': '',
}


def _freeze(value):
    if isinstance(value, Mapping):
        return ImmutableDict((k, _freeze(v)) for k, v in value.items())
    return value


def make_options(overrides=None, defaults=None):
    """
    Merges ``overrides`` into the default options.

    Nested dictionaries such as ``classmap`` and ``headers`` are merged key by key, so ``{'headers': {'X-Foo': 'bar'}}``
    keeps the default ``Accept`` header. Options without a default are kept as they are.

    :return: an immutable dictionary
    """
    merged = merge_recursive(DEFAULTS if defaults is None else defaults, overrides or {})
    return _freeze(merged)


class Credential(object):
    """
    Key material for a client. Use :func:`as_credential` to wrap a string or a function.
    """

    def resolve(self):
        raise NotImplementedError()


class Literal(Credential):

    def __init__(self, value):
        self.value = value

    def resolve(self):
        return self.value

    def __repr__(self):
        return '<Literal ***>'


class Provider(Credential):
    """
    A function without arguments returning the key, called when the client is constructed.
    """

    def __init__(self, function):
        self.function = function

    def resolve(self):
        return self.function()

    def __repr__(self):
        return '<Provider {!r}>'.format(self.function)


def as_credential(value):
    if isinstance(value, Credential):
        return value
    if callable(value):
        return Provider(value)
    return Literal(value)


def resolve_credential(value):
    return as_credential(value).resolve()
