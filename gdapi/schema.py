import logging

from . import signals
from .exceptions import InvalidResponse
from .resource import Collection, Resource
from .transport import join_url
from .types import Type, TypeRegistry
from .utils import parse_json

log = logging.getLogger(__name__)

CACHE_KEY_PREFIX = 'restclient_'


class SchemaLoader(object):
    """
    Loads the schema of an API version and builds the :class:`gdapi.types.TypeRegistry` of a client.

    The schema document is read from the ``schema_file`` option if it is set, otherwise from the cache, otherwise
    from the API. A document describing an API version is followed to the version's ``schemas`` link once. A
    document listing schemas is turned into types, and the client is rebased to the document's ``root`` link.

    Errors are signaled through :meth:`gdapi.Client.error`; when the client does not raise, :meth:`load` returns
    whatever the client returned instead of a registry.

    :param client: the client to load the schema for
    :param cache: a :class:`gdapi.cache.Cache` or ``None``
    """

    def __init__(self, client, cache=None):
        self.client = client
        self.cache = cache

    def cache_key(self, path):
        namespace = self.client.options['cache_namespace']
        return ''.join((CACHE_KEY_PREFIX, namespace + '_' if namespace else '', self.client.id, '_', path))

    def load(self, path='/'):
        return self._load(path, ())

    def _read_file(self, filename):
        with open(filename, 'rb') as f:
            return parse_json(f.read(), self.client.options['json_depth_limit'])

    def _fetch(self, path):
        client = self.client
        schema_file = client.options['schema_file']

        if schema_file:
            try:
                return self._read_file(schema_file), False
            except (OSError, InvalidResponse) as e:
                return client.error('Unable to load API schema from "{}": {}'.format(schema_file, e), 'schema'), None

        if self.cache is not None:
            document = self.cache.get(self.cache_key(path))
            if document:
                log.debug('Loaded schema for %s from cache', path)
                return document, False

        try:
            document = client.requestor.request('GET', path)
        except InvalidResponse as e:
            return client.error('Unable to load API schema: {}'.format(e), 'schema'), None

        status = client.requestor.get_meta().get('status')
        if not document or (status is not None and not 200 <= status < 300):
            return client.error('Unable to load API schema', 'schema', client.classify(document)), None
        return document, True

    def _load(self, path, redirected_from):
        client = self.client
        url = join_url(client.base_url, path)

        document, fetched = self._fetch(path)
        if fetched is None:
            return document

        res = client.classify(document)
        if not isinstance(res, Resource):
            return client.error('The base URL "{}" does not look like an API version'.format(url), 'schema', res)

        resource_types = res.get_resource_types()

        if res.get_type() == 'apiversion' and res.get_link('schemas') and not redirected_from:
            # the root of a version; its schemas are one link away
            return self._load(res.get_link('schemas'), redirected_from + (path,))

        if isinstance(res, Collection) and 'apiversion' in resource_types:
            return client.error('The base URL "{}" does not specify an API version to use'.format(url), 'version', res)

        if isinstance(res, Collection) and 'schema' in resource_types:
            root = res.get_link('root')
            if root:
                client.rebase(root)

            types = TypeRegistry(Type(client.id, schema) for schema in res if isinstance(schema, Resource))

            if self.cache is not None and fetched:
                for key_path in redirected_from + (path,):
                    self.cache.set(self.cache_key(key_path), document)

            log.info('Loaded %d types from %s', len(types), url)
            signals.schema_loaded.send(client, types=types)
            return types

        return client.error('The base URL "{}" does not look like an API version'.format(url), 'schema', res)
