import threading
import weakref


class ClientRegistry(object):
    """
    Process-wide table of live clients, keyed by client identity.

    At most one client is retained per identity; registering a second client with the same identity replaces the
    entry. Entries are weak references, so a client that is garbage-collected without being closed is reported as
    absent by :meth:`lookup`.

    Clients register themselves when they are constructed and unregister when closed. Every operation holds
    ``lock``, which defaults to a :class:`threading.RLock` and can be replaced for tests or for sharing a lock with
    other process-wide state.

    :param lock: a lock object supporting the context manager protocol
    """

    def __init__(self, lock=None):
        self.lock = threading.RLock() if lock is None else lock
        self._clients = {}

    def register(self, identity, client):
        with self.lock:
            self._clients[identity] = weakref.ref(client)

    def lookup(self, identity):
        with self.lock:
            ref = self._clients.get(identity)
            if ref is None:
                return None

            client = ref()
            if client is None:
                del self._clients[identity]
            return client

    def unregister(self, identity, client=None):
        """
        Removes the entry for ``identity``. When ``client`` is given, the entry is only removed if it still points at
        that client.
        """
        with self.lock:
            ref = self._clients.get(identity)
            if ref is None:
                return
            if client is None or ref() is client or ref() is None:
                del self._clients[identity]

    def replace(self, identity, expected, client=None):
        """
        Points ``identity`` at ``client``, or removes the entry when ``client`` is ``None``, but only while the entry
        still points at ``expected``.

        :return: ``True`` if the entry was changed
        """
        with self.lock:
            ref = self._clients.get(identity)
            if ref is None or ref() is not expected:
                return False

            if client is None:
                del self._clients[identity]
            else:
                self._clients[identity] = weakref.ref(client)
            return True

    def clear(self):
        with self.lock:
            self._clients.clear()

    def __contains__(self, identity):
        return self.lookup(identity) is not None

    def __len__(self):
        with self.lock:
            return sum(1 for ref in self._clients.values() if ref() is not None)


clients = ClientRegistry()
