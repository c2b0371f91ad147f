import json
import logging
import os

from .utils import md5_hex

log = logging.getLogger(__name__)


class Cache(object):
    """
    Interface for schema caches. Set a cache for all clients with :meth:`gdapi.Client.set_cache`.

    Cached values are parsed JSON documents.
    """

    def get(self, key):
        """
        :return: the document stored under ``key``, or ``None``
        """
        raise NotImplementedError()

    def set(self, key, value):
        raise NotImplementedError()


class MemoryCache(Cache):

    def __init__(self):
        self.items = {}

    def get(self, key):
        return self.items.get(key)

    def set(self, key, value):
        self.items[key] = value


class FileCache(Cache):
    """
    Stores every document as a JSON file in ``directory``, which is created if it does not exist.
    """

    def __init__(self, directory):
        self.directory = directory

    def _path(self, key):
        return os.path.join(self.directory, '{}.json'.format(md5_hex(key)))

    def get(self, key):
        try:
            with open(self._path(key)) as f:
                return json.load(f)
        except FileNotFoundError:
            return None
        except ValueError:
            log.warning('Ignoring unreadable cache entry for %s', key)
            return None

    def set(self, key, value):
        os.makedirs(self.directory, exist_ok=True)
        path = self._path(key)
        with open(path + '.tmp', 'w') as f:
            json.dump(value, f)
        os.replace(path + '.tmp', path)
