import copy
import inspect
import logging
from collections.abc import Mapping
from importlib import import_module

from .resource import Resource, value_classes

log = logging.getLogger(__name__)


def resolve_class(value):
    """
    Attempt to resolve ``value`` to a value class.

    ``value`` may be a class, the name a :class:`Resource` subclass is registered under, or a dotted import path
    (``'myapp.resources.Domain'``).

    :return: the class, or ``None`` if nothing by that name can be loaded
    """
    if inspect.isclass(value):
        return value

    if not isinstance(value, str) or not value:
        return None

    if value in value_classes:
        return value_classes[value]

    try:
        module_name, class_name = value.rsplit('.', 1)
        module = import_module(module_name)
        class_ = getattr(module, class_name)
    except (ValueError, ImportError, AttributeError):
        return None

    if inspect.isclass(class_):
        return class_
    return None


class Classifier(object):
    """
    Converts parsed response data into value objects.

    Objects are converted into an instance of the class named by their type attribute; lists are converted element
    by element; everything else is returned unchanged.

    The class for an object is chosen by looking up its type in ``classmap``, then among the names
    :class:`Resource` subclasses are registered under, and finally falls back to ``default_class``. Lists inside an
    object are classified before the object is constructed; nested objects are passed on to the
    constructed class as they are.

    :param str client_id: identity passed to every constructed object
    :param dict classmap: a mapping of type names to classes, registered class names or import paths
    :param default_class: class used when a type cannot be resolved
    :param str type_attr: name of the type attribute
    """

    def __init__(self, client_id, classmap=None, default_class=Resource, type_attr='type'):
        self.client_id = client_id
        self.classmap = dict(classmap or {})
        self.default_class = resolve_class(default_class) or Resource
        self.type_attr = type_attr

    @classmethod
    def from_options(cls, client_id, options):
        return cls(client_id,
                   classmap=options['classmap'],
                   default_class=options['default_class'],
                   type_attr=options['type_attr'])

    def class_for(self, type_name):
        class_ = None
        if isinstance(type_name, str) and type_name:
            # types sent by the server are only matched against registered names, never imported
            if type_name in self.classmap:
                class_ = resolve_class(self.classmap[type_name])
            else:
                class_ = value_classes.get(type_name)

        if class_ is None:
            log.debug('No class for type %r, using %s', type_name, self.default_class.__name__)
            return self.default_class
        return class_

    def classify(self, data):
        if isinstance(data, Mapping):
            return self._classify_object(data)
        if isinstance(data, (list, tuple)):
            return [self.classify(item) for item in data]
        return data

    __call__ = classify

    def _classify_object(self, data):
        class_ = self.class_for(data.get(self.type_attr))

        attributes = {}
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                attributes[key] = self.classify(value)
            else:
                attributes[key] = copy.deepcopy(value)

        return class_(self.client_id, attributes, type_attr=self.type_attr)
