
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import zmq
import itertools
import traceback

import threading as mt

from typing      import Optional, Any, Dict, Callable

from ..logger    import Logger
from ..serialize import to_msgpack, from_msgpack

from .utils      import no_intr, zmq_bind


_LINGER_TIMEOUT  = 250   # ms to linger after close
_POLL_TIMEOUT    = 100   # ms between checks for termination

_uids = itertools.count()


# ------------------------------------------------------------------------------
#
class Server(object):
    '''
    Request/response server on a background thread.  Requests have the form
    `{'cmd': str, 'args': list, 'kwargs': dict}` and are dispatched to the
    callback registered for `cmd`, one at a time.  Replies have the form
    `{'err': str, 'exc': str, 'res': any}`, where `err` and `exc` (the
    traceback) are set if the request failed.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, url : Optional[str]    = None,
                       uid : Optional[str]    = None,
                       log : Optional[Logger] = None) -> None:

        self._url  = url
        self._uid  = uid or 'server.%04d' % next(_uids)
        self._log  = log or Logger(self._uid, ns='loop_dispatch',
                                   targets='null')
        self._cbs  = {'echo': self._request_echo}
        self._addr = None
        self._err  = None

        self._thread = None
        self._up     = mt.Event()
        self._term   = mt.Event()


    # --------------------------------------------------------------------------
    #
    @property
    def uid(self) -> str:
        return self._uid

    @property
    def addr(self) -> Optional[str]:
        return self._addr


    # --------------------------------------------------------------------------
    #
    def register_request(self, cmd: str, cb: Callable) -> None:

        self._cbs[cmd] = cb


    def _request_echo(self, arg: Any = None) -> Any:

        return arg


    # --------------------------------------------------------------------------
    #
    def start(self) -> None:
        '''
        Start serving, and return once the server is bound (`addr` is set).
        Raises a `RuntimeError` if binding failed.
        '''

        if self._thread:
            raise RuntimeError('server %s already started' % self._uid)

        self._thread = mt.Thread(target=self._serve, name=self._uid,
                                 daemon=True)
        self._thread.start()
        self._up.wait()

        if self._err:
            raise RuntimeError('server %s cannot bind to %s: %s'
                              % (self._uid, self._url, self._err))

        self._log.info('server %s listens at %s', self._uid, self._addr)


    def stop(self) -> None:

        self._term.set()


    def wait(self) -> None:

        if self._thread:
            self._thread.join()


    # --------------------------------------------------------------------------
    #
    def _success(self, res: Any = None) -> Dict[str, Any]:

        return {'err': None, 'exc': None, 'res': res}


    def _error(self, err: Optional[str] = None,
                     exc: Optional[str] = None) -> Dict[str, Any]:

        return {'err': err or 'invalid request', 'exc': exc, 'res': None}


    # --------------------------------------------------------------------------
    #
    def _handle(self, msg: bytes) -> Dict[str, Any]:

        try:
            req = from_msgpack(msg)

            if not isinstance(req, dict):
                return self._error('invalid message type')

            cmd = req.get('cmd')
            if not cmd:
                return self._error('no command in request')

            cb = self._cbs.get(cmd)
            if not cb:
                return self._error('command [%s] unknown' % cmd)

            self._log.debug('%s: %s', self._uid, cmd)
            return self._success(cb(*(req.get('args')   or []),
                                   **(req.get('kwargs') or {})))

        except Exception as e:
            self._log.exception('%s: request failed', self._uid)
            return self._error('command failed: %r' % e,
                               traceback.format_exc())


    def _pack(self, rep: Dict[str, Any]) -> bytes:

        try:
            return to_msgpack(rep)

        except (TypeError, ValueError) as e:
            self._log.error('%s: cannot pack reply: %s', self._uid, e)
            return to_msgpack(self._error('cannot pack reply: %s' % e))


    # --------------------------------------------------------------------------
    #
    def _serve(self) -> None:

        ctx  = zmq.Context()
        sock = ctx.socket(zmq.REP)
        sock.linger = _LINGER_TIMEOUT

        try:
            try:
                self._addr = zmq_bind(sock, url=self._url)

            except zmq.ZMQError as e:
                self._err = e
                return

            finally:
                self._up.set()

            while not self._term.is_set():

                if no_intr(sock.poll, timeout=_POLL_TIMEOUT):
                    rep = self._handle(no_intr(sock.recv))
                    no_intr(sock.send, self._pack(rep))

        finally:
            sock.close()
            ctx.term()
            self._log.debug('%s: stopped', self._uid)


# ------------------------------------------------------------------------------

