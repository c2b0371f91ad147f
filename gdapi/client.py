import logging

from . import signals
from .classify import Classifier, resolve_class
from .exceptions import APIException, SchemaError, UNKNOWN_STATUS
from .options import make_options, resolve_credential
from .registry import clients
from .resource import Error
from .schema import SchemaLoader
from .types import TypeRegistry
from .utils import md5_hex

log = logging.getLogger(__name__)


def client_identity(base_url, access_key=None, secret_key=None):
    """
    Returns the identity of a ``(base_url, access_key, secret_key)`` combination, used to look clients up with
    :meth:`Client.get` and to namespace cached schemas.
    """
    return md5_hex(base_url, str(access_key or ''), str(secret_key or ''))


class Client(object):
    """
    A client for a REST API that describes its types with a schema.

    The schema is loaded when the client is constructed and every response is converted into
    :class:`gdapi.Resource` objects, :class:`gdapi.Collection` objects or lists of them, depending on the type of
    the response. Types are available as attributes of the client::

        client = Client('https://api.example.com/v1', 'access-key', 'secret-key')
        widgets = client.widget.list(name='foo')

    Clients register themselves so that resources can find the client they came from; use :meth:`close` or a
    ``with`` block to unregister a client.

    :param str base_url: the root URL of the API; it should include the API version
    :param access_key: the access key, or a function returning it
    :param secret_key: the secret key, or a function returning it
    :param dict options: options overriding :data:`gdapi.options.DEFAULTS`
    :raises SchemaError: if the schema cannot be loaded
    """

    #: a :class:`gdapi.cache.Cache` shared by all clients, see :meth:`set_cache`
    cache = None

    def __init__(self, base_url, access_key=None, secret_key=None, options=None):
        self.options = make_options(options)
        self.base_url = base_url
        self.types = TypeRegistry()

        if access_key is not None:
            access_key = resolve_credential(access_key)
        if secret_key is not None:
            secret_key = resolve_credential(secret_key)

        self.id = client_identity(base_url, access_key, secret_key)
        self.classifier = Classifier.from_options(self.id, self.options)

        request_class = resolve_class(self.options['request_class'])
        if request_class is None:
            raise ValueError('Unable to load request class {!r}'.format(self.options['request_class']))
        self.requestor = request_class(self, base_url, self.options)

        if access_key and secret_key:
            self.requestor.set_auth(access_key, secret_key)

        # resources created while loading the schema look up this client by its id
        with clients.lock:
            previous = clients.lookup(self.id)
            clients.register(self.id, self)
        try:
            self.types = self._load_schema()
        except Exception:
            # a client registered under the same id in the meantime is left in place
            clients.replace(self.id, self, previous)
            raise

        log.debug('Client %s connected to %s', self.id, self.base_url)

    @staticmethod
    def get(id):
        """
        Returns the live client with the given id, or ``None``.
        """
        return clients.lookup(id)

    @classmethod
    def set_cache(cls, cache):
        """
        Sets the cache used to store schemas, or disables caching when ``cache`` is ``None``.

        :param gdapi.cache.Cache cache:
        """
        cls.cache = cache

    def _load_schema(self):
        result = SchemaLoader(self, self.cache).load()
        if not isinstance(result, TypeRegistry):
            raise SchemaError('Unable to load the API schema for "{}"'.format(self.base_url), body=result)
        return result

    def reload_schema(self):
        """
        Loads the schema again and replaces all types.
        """
        self.types = self._load_schema()
        return self.types

    def rebase(self, base_url):
        self.base_url = base_url
        self.requestor.base_url = base_url

    def __getattr__(self, name):
        # 'types' is missing only when __init__ has not run
        if name.startswith('_') or name == 'types':
            raise AttributeError(name)
        return self.get_type(name)

    def get_type(self, name):
        if name not in self.types:
            return self.error('There is no type for "{}" defined in the schema'.format(name), 'type')
        return self.types[name]

    def get_types(self):
        return self.types

    def get_requestor(self):
        return self.requestor

    def get_meta(self):
        """
        Returns metadata about the last request and response.
        """
        return self.requestor.get_meta()

    def request(self, method, path, query=None, body=None, content_type=None):
        """
        Performs a request and classifies the response.

        Responses with an HTTP error status are signaled with :meth:`error`.

        :param str method: HTTP method
        :param str path: URL, or path relative to the base URL
        :param dict query: query string parameters
        :param body: request body; dictionaries, lists and resources are sent as JSON
        :param str content_type: content type of ``body``
        """
        signals.before_request.send(self, method=method, path=path)
        data = self.requestor.request(method, path, query, body, content_type)
        meta = self.requestor.get_meta()
        signals.after_request.send(self, meta=meta)

        result = self.classify(data)

        status = meta.get('status')
        if isinstance(status, int) and status >= 400:
            message = None
            if isinstance(result, Error) and result.message:
                message = result.message
            return self.error(message, status, result)
        return result

    def classify(self, data):
        """
        Converts response data into resources according to their type attribute.
        """
        return self.classifier.classify(data)

    def error(self, message, status, body=None):
        """
        Signals an error.

        When the ``throw_exceptions`` option is set, raises the :class:`APIException` subclass registered for
        ``status`` in :attr:`APIException.status_map`; statuses that are not integers are reported as ``-1``.
        Otherwise returns ``body``.

        :param str message: the error message
        :param status: HTTP status or error category, such as ``'schema'`` or ``'type'``
        :param body: the response or error details
        """
        if not self.options['throw_exceptions']:
            return body

        try:
            exception_class = APIException.status_map.get(status, APIException)
        except TypeError:
            # unhashable status
            exception_class = APIException

        if not isinstance(status, int) or isinstance(status, bool):
            status = UNKNOWN_STATUS

        raise exception_class(message, status, body)

    def close(self):
        """
        Removes the client from the registry of live clients.
        """
        clients.unregister(self.id, self)
        signals.client_closed.send(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return '<Client {} {}>'.format(self.id, self.base_url)
