
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import zmq

from typing import Any, Optional

from ..serialize import to_msgpack, from_msgpack
from ..logger    import Logger
from .utils      import no_intr


# ------------------------------------------------------------------------------
#
_LINGER_TIMEOUT  =    0  # ms to linger after close
_HIGH_WATER_MARK = 1024  # number of messages to buffer before dropping


# ------------------------------------------------------------------------------
#
class Client(object):
    '''
    Synchronous request/response client for a `Server` (or `Registry`)
    endpoint.  Only one request can be outstanding at any time: a reply must be
    received (or the request must be cancelled) before the next request is
    sent.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, url: str,
                       ctx: Optional[zmq.Context] = None,
                       log: Optional[Logger]      = None) -> None:

        if not url:
            raise ValueError('need server url')

        self._url     = url
        self._log     = log
        self._own_ctx = ctx is None
        self._ctx     = ctx or zmq.Context()
        self._sock    = None
        self._pending = False

        try:
            self._connect()

        except Exception:
            if self._own_ctx:
                self._ctx.term()
            raise


    # --------------------------------------------------------------------------
    #
    def _connect(self) -> None:
        '''
        Create and connect the REQ socket.  If the url is malformed (e.g. lacks
        the transport), the socket is closed again before the `zmq.ZMQError`
        is raised.
        '''

        sock = self._ctx.socket(zmq.REQ)

        sock.linger = _LINGER_TIMEOUT
        sock.hwm    = _HIGH_WATER_MARK

        try:
            sock.connect(self._url)

        except Exception:
            sock.close()
            raise

        self._sock = sock


    # --------------------------------------------------------------------------
    #
    @property
    def url(self) -> str:
        return self._url


    @property
    def pending(self) -> bool:
        return self._pending


    # --------------------------------------------------------------------------
    #
    def send(self, cmd: str, *args: Any, **kwargs: Any) -> None:

        if self._pending:
            raise RuntimeError('request pending on %s' % self._url)

        msg = {'cmd'   : cmd,
               'args'  : args,
               'kwargs': kwargs}

        if self._log:
            self._log.debug('request: %s', msg)

        no_intr(self._sock.send, to_msgpack(msg))
        self._pending = True


    # --------------------------------------------------------------------------
    #
    def recv(self, timeout: Optional[float] = None) -> Any:
        '''
        Wait for the reply to the pending request and return its result.
        Raise a `TimeoutError` if no reply arrives within `timeout` seconds -
        the request remains pending in that case and `recv()` can be called
        again.  Errors reported by the server are raised as `RuntimeError`.
        '''

        if not self._pending:
            raise RuntimeError('no request pending on %s' % self._url)

        if timeout is not None:
            if not no_intr(self._sock.poll, timeout=int(timeout * 1000)):
                raise TimeoutError('no reply from %s after %.1fs'
                                  % (self._url, timeout))

        data = no_intr(self._sock.recv)
        self._pending = False

        if data is None:
            raise RuntimeError('connection to %s closed' % self._url)

        res = from_msgpack(data)

        if self._log:
            self._log.debug('reply: %s', res)

        if res.get('err'):
            err_msg = 'ERROR: %s' % res['err']
            if res.get('exc'):
                err_msg += '\n%s' % ''.join(res['exc'])
            raise RuntimeError(err_msg)

        return res['res']


    # --------------------------------------------------------------------------
    #
    def cancel(self) -> None:
        '''
        Drop a pending request.  A REQ socket cannot send again before
        receiving, so the socket is replaced.
        '''

        if not self._pending:
            return

        self._sock.close()
        self._sock    = None
        self._pending = False
        self._connect()


    # --------------------------------------------------------------------------
    #
    def request(self, cmd: str, *args: Any,
                      timeout: Optional[float] = None, **kwargs: Any) -> Any:
        '''
        Send a request and wait for its result.  On timeout, the request is
        cancelled and a `TimeoutError` is raised.
        '''

        self.send(cmd, *args, **kwargs)

        try:
            return self.recv(timeout=timeout)

        except TimeoutError:
            self.cancel()
            raise


    # --------------------------------------------------------------------------
    #
    def close(self) -> None:

        if self._sock:
            self._sock.close()
            self._sock = None

        if self._own_ctx:
            self._ctx.term()


    def __enter__(self) -> 'Client':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ------------------------------------------------------------------------------

