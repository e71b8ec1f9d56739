
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


from typing import Optional, Any, Dict

from ..logger import Logger

from .server import Server
from .client import Client


# ------------------------------------------------------------------------------
#
class Registry(Server):
    '''
    In-memory key/value store served over zmq.  Keys are dot-separated paths
    into nested dicts: after `put('services.submit_task', addr)`,
    `get('services')` returns `{'submit_task': addr}`.  Services announce
    their endpoint address here, and clients look them up by name.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, url: Optional[str]    = None,
                       uid: Optional[str]    = None,
                       log: Optional[Logger] = None) -> None:

        super().__init__(url=url, uid=uid or 'registry', log=log)

        self._data = dict()

        self.register_request('put', self.put)
        self.register_request('get', self.get)
        self.register_request('del', self.delete)


    # --------------------------------------------------------------------------
    #
    def _parent(self, key: str, create: bool = False) -> Optional[Dict]:

        node = self._data
        for elem in key.split('.')[:-1]:
            if not isinstance(node.get(elem), dict):
                if not create:
                    return None
                node[elem] = dict()
            node = node[elem]

        return node


    def put(self, key: str, val: Any) -> None:

        self._log.debug('put %s: %s', key, val)
        self._parent(key, create=True)[key.split('.')[-1]] = val


    def get(self, key: str) -> Optional[Any]:

        node = self._parent(key)
        if node is None:
            return None

        return node.get(key.split('.')[-1])


    def delete(self, key: str) -> None:

        self._log.debug('del %s', key)

        node = self._parent(key)
        if node is not None:
            node.pop(key.split('.')[-1], None)


# ------------------------------------------------------------------------------
#
class RegistryClient(Client):
    '''
    Client for a `Registry`.  If `pwd` is given, all keys are relative to that
    path.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, url: str,
                       pwd: Optional[str]    = None,
                       ctx: Optional[Any]    = None,
                       log: Optional[Logger] = None) -> None:

        self._pwd = pwd

        super().__init__(url=url, ctx=ctx, log=log)


    def _key(self, key: str) -> str:

        if self._pwd:
            return '%s.%s' % (self._pwd, key)
        return key


    # --------------------------------------------------------------------------
    #
    def get(self, key: str, default: Optional[Any] = None,
                  timeout: Optional[float] = None) -> Optional[Any]:

        val = self.request('get', key=self._key(key), timeout=timeout)

        if val is None:
            return default
        return val


    def put(self, key: str, val: Any, timeout: Optional[float] = None) -> None:

        self.request('put', key=self._key(key), val=val, timeout=timeout)


    def delete(self, key: str, timeout: Optional[float] = None) -> None:

        self.request('del', key=self._key(key), timeout=timeout)


# ------------------------------------------------------------------------------

