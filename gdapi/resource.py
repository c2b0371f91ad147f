import copy

from .registry import clients
from .utils import AttributeDict, to_camel_case

#: Value classes by name, populated by :class:`ResourceMeta`.
value_classes = {}


class ResourceMeta(type):

    def __new__(mcs, name, bases, members):
        class_ = super(ResourceMeta, mcs).__new__(mcs, name, bases, members)
        class_.meta = meta = AttributeDict()

        if 'Meta' in members:
            changes = members['Meta'].__dict__
            for k, v in changes.items():
                if not k.startswith('__'):
                    meta[k] = v

        if not meta.get('name', None):
            meta['name'] = name.lower()

        value_classes[meta.name] = class_
        return class_


class Resource(object, metaclass=ResourceMeta):
    """
    A single object returned by the API.

    Attributes of the response are available as Python attributes (``widget.name``) and through ``get_*`` getters,
    which accept the snake-case form of camel-cased attribute names (``schema.get_resource_fields()``). Assigning
    to an attribute records a change that is sent to the server by :meth:`save`.

    Subclasses are registered by name and are picked up by the classifier whenever a response's type matches that
    name. The name defaults to the lower-case class name and can be set with a ``Meta`` class::

        class Domain(Resource):
            class Meta:
                name = 'domain'

    :param str client_id: identity of the client the resource belongs to
    :param dict data: the response object
    :param str type_attr: the attribute holding the type; read from the client's options when not given
    """

    def __init__(self, client_id, data=None, type_attr=None):
        object.__setattr__(self, '_client_id', client_id)
        object.__setattr__(self, '_type_attr_name', type_attr)
        object.__setattr__(self, '_data', dict(data or {}))
        object.__setattr__(self, '_changes', {})

    @property
    def _client(self):
        client = clients.lookup(self._client_id)
        if client is None:
            raise RuntimeError('No client with id "{}" is available.'.format(self._client_id))
        return client

    def _type_attr(self):
        if self._type_attr_name:
            return self._type_attr_name

        client = clients.lookup(self._client_id)
        if client is None:
            return 'type'
        return client.options['type_attr']

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        data = self._data
        if name in data:
            return data[name]

        if name.startswith('get_') and len(name) > 4:
            key = name[4:]

            def getter():
                if key in data:
                    return data[key]
                return data.get(to_camel_case(key))

            return getter

        raise AttributeError('"{}" has no attribute "{}"'.format(self.get_type(), name))

    def __setattr__(self, name, value):
        if name.startswith('_'):
            object.__setattr__(self, name, value)
        else:
            self._data[name] = value
            self._changes[name] = value

    def __dir__(self):
        return sorted(set(super(Resource, self).__dir__()) | set(self._data))

    def get_id(self):
        return self._data.get('id')

    def get_type(self):
        return self._data.get(self._type_attr())

    def meta_is_set(self, key):
        return key in self._data

    def get_resource_types(self):
        """
        Returns the set of resource types the response advertises, read from ``resourceTypes`` (either a mapping or a
        list) and ``resourceType``.
        """
        types = set(self._data.get('resourceTypes') or ())
        if self._data.get('resourceType'):
            types.add(self._data['resourceType'])
        return types

    def get_links(self):
        return self._data.get('links') or {}

    def get_link(self, name):
        return self.get_links().get(name)

    def get_actions(self):
        return self._data.get('actions') or {}

    def get_action(self, name):
        return self.get_actions().get(name)

    def follow_link(self, name, query=None):
        link = self.get_link(name)
        if link is None:
            return self._client.error('There is no link named "{}"'.format(name), 'link')
        return self._client.request('GET', link, query)

    def do_action(self, name, body=None):
        action = self.get_action(name)
        if action is None:
            return self._client.error('There is no action named "{}" available'.format(name), 'action')
        return self._client.request('POST', action, body=body)

    def reload(self):
        result = self._client.request('GET', self.get_link('self'))
        if isinstance(result, Resource):
            object.__setattr__(self, '_data', dict(result._data))
            self._changes.clear()
        return result

    def save(self):
        """
        Sends the attributes changed since the last load with a ``PUT`` to the resource's ``self`` link and updates
        the resource with the server's response.
        """
        if not self._changes:
            return self

        result = self._client.request('PUT', self.get_link('self'), body=dict(self._changes))
        if isinstance(result, Resource):
            object.__setattr__(self, '_data', dict(result._data))
            self._changes.clear()
        return result

    def remove(self):
        return self._client.request('DELETE', self.get_link('self'))

    def to_dict(self):
        return _unclassify(self._data)

    def __eq__(self, other):
        return type(self) is type(other) and self._data == other._data

    def __ne__(self, other):
        return not self == other

    __hash__ = object.__hash__

    def __repr__(self):
        return '<{} {} {}>'.format(self.__class__.__name__, self.get_type(), self.get_id())


class Collection(Resource):
    """
    A list of resources. Supports ``len()``, indexing and iteration over the ``data`` items, which the classifier has
    already converted into resources.
    """

    def _items(self):
        return self._data.get('data') or []

    def __len__(self):
        return len(self._items())

    def __getitem__(self, index):
        return self._items()[index]

    def __iter__(self):
        return iter(self._items())

    def __bool__(self):
        return True

    def get_pagination(self):
        return self._data.get('pagination') or {}

    def has_next(self):
        return bool(self.get_pagination().get('next'))

    def next_page(self):
        if not self.has_next():
            return None
        return self._client.request('GET', self.get_pagination()['next'])

    def get_filters(self):
        return self._data.get('filters') or {}

    def get_sort_links(self):
        return self._data.get('sortLinks') or {}

    def __repr__(self):
        return '<{} {} [{}]>'.format(self.__class__.__name__, self._data.get('resourceType'), len(self))


class Error(Resource):

    @property
    def status(self):
        return self._data.get('status')

    @property
    def code(self):
        return self._data.get('code')

    @property
    def message(self):
        return self._data.get('message')

    @property
    def detail(self):
        return self._data.get('detail')

    def __repr__(self):
        return '<{} {} {}>'.format(self.__class__.__name__, self.status, self.code)


def _unclassify(value):
    if isinstance(value, Resource):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _unclassify(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_unclassify(v) for v in value]
    return copy.copy(value)
