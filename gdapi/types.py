from collections.abc import Mapping

from .registry import clients
from .transport import join_url


class Type(object):
    """
    A resource type described by the API schema.

    :param str client_id: identity of the client the type belongs to
    :param gdapi.Resource schema: the schema element describing the type

    .. attribute:: name

        The schema ``id``, which is also the name of the type in responses.
    """

    def __init__(self, client_id, schema):
        self.client_id = client_id
        self.schema = schema
        self.name = schema.get_id()

    @property
    def _client(self):
        client = clients.lookup(self.client_id)
        if client is None:
            raise RuntimeError('No client with id "{}" is available.'.format(self.client_id))
        return client

    @property
    def resource_fields(self):
        return self.schema.get_resource_fields() or {}

    @property
    def collection_methods(self):
        return tuple(self.schema.get_collection_methods() or ())

    @property
    def resource_methods(self):
        return tuple(self.schema.get_resource_methods() or ())

    @property
    def collection_filters(self):
        return self.schema.get_collection_filters() or {}

    @property
    def resource_actions(self):
        return self.schema.get_resource_actions() or {}

    @property
    def links(self):
        return self.schema.get_links()

    @property
    def collection_url(self):
        return self.links.get('collection') or join_url(self._client.base_url, self.name)

    def resource_url(self, id):
        return '{}/{}'.format(self.collection_url.rstrip('/'), id)

    def can_list(self):
        return 'GET' in self.collection_methods

    def can_create(self):
        return 'POST' in self.collection_methods

    def can_update(self):
        return 'PUT' in self.resource_methods

    def can_delete(self):
        return 'DELETE' in self.resource_methods

    def _unsupported(self, operation):
        return self._client.error('The "{}" type does not support {}'.format(self.name, operation), 'method')

    def query(self, filters=None, sort=None, order=None, limit=None, marker=None, include=None):
        """
        Lists the resources of this type.

        :param dict filters: a mapping of field names to values, or to lists of ``(modifier, value)`` pairs, e.g.
            ``{'name': 'foo', 'count': [('gt', 3), ('lt', 10)]}``
        :param str sort: field to sort by
        :param str order: ``'asc'`` or ``'desc'``
        :param int limit: maximum number of items
        :param str marker: pagination marker returned by a previous page
        :param include: name or list of names of links to include
        :return: a :class:`gdapi.Collection`
        """
        if not self.can_list():
            return self._unsupported('listing')

        query = query_params(filters, sort=sort, order=order, limit=limit, marker=marker, include=include)
        return self._client.request('GET', self.collection_url, query)

    def list(self, **filters):
        return self.query(filters)

    def get(self, id):
        return self._client.request('GET', self.resource_url(id))

    def create(self, data):
        if not self.can_create():
            return self._unsupported('creation')
        return self._client.request('POST', self.collection_url, body=data)

    def update(self, id, data):
        if not self.can_update():
            return self._unsupported('updates')
        return self._client.request('PUT', self.resource_url(id), body=data)

    def remove(self, id):
        if not self.can_delete():
            return self._unsupported('removal')
        return self._client.request('DELETE', self.resource_url(id))

    def __repr__(self):
        return "<Type '{}'>".format(self.name)


def query_params(filters=None, **params):
    query = {}
    for name, value in (filters or {}).items():
        if isinstance(value, list):
            for modifier, modifier_value in value:
                key = name if modifier in (None, '', 'eq') else '{}_{}'.format(name, modifier)
                query.setdefault(key, []).append(modifier_value)
        else:
            query[name] = value

    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            value = list(value)
        query[name] = value
    return query


class TypeRegistry(Mapping):
    """
    An immutable mapping of type names to :class:`Type` objects.
    """

    def __init__(self, types=()):
        self._types = {type_.name: type_ for type_ in types}

    def __getitem__(self, name):
        return self._types[name]

    def __iter__(self):
        return iter(self._types)

    def __len__(self):
        return len(self._types)

    def __repr__(self):
        return '<TypeRegistry {}>'.format(sorted(self._types))
