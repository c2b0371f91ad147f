from .cache import Cache, FileCache, MemoryCache
from .client import Client, client_identity
from .exceptions import APIException, SchemaError, TypeNotFound, VersionRequired
from .resource import Collection, Error, Resource
from .types import Type, TypeRegistry

__version__ = '1.0.0'

__all__ = (
    'Client',
    'client_identity',
    'Resource',
    'Collection',
    'Error',
    'Type',
    'TypeRegistry',
    'Cache',
    'MemoryCache',
    'FileCache',
    'APIException',
    'SchemaError',
    'VersionRequired',
    'TypeNotFound',
    'classify',
    'exceptions',
    'options',
    'registry',
    'schema',
    'signals',
    'transport',
)
