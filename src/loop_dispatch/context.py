
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'

# ------------------------------------------------------------------------------
#
# A `Context` owns everything a process needs to talk to services: the zmq
# context, a connection to the name registry, and the shutdown state.  It is
# created explicitly, handed to whoever needs it, and closed on every exit
# path (use it as a context manager):
#
#     with Context(cfg) as ctx:
#         client = ctx.create_client('submit_task')
#         client.wait_for_service()
#         res = client.call(request)
#
# Services announce themselves under `services.<name>` in the registry, with
# their endpoint address as value.  A service is available if that name
# resolves and the endpoint answers an `echo` request.
#
# While the context is active (and if created in the main thread), SIGINT and
# SIGTERM trigger `shutdown()`: all waits on the context return within one
# poll interval, and the waiting calls fail.
#

import time
import signal
import zmq

import threading as mt

from .config   import Config
from .logger   import Logger
from .errors   import ServiceUnavailable, TransportFailure
from .zmq      import Client, Server, RegistryClient


SERVICE_NS    = 'services'
_MIN_ATTEMPT  = 0.1   # s, minimal time given to a single request


# ------------------------------------------------------------------------------
#
class Context(object):

    # --------------------------------------------------------------------------
    #
    def __init__(self, cfg=None, log=None, handle_signals=True):

        if cfg is None:
            cfg = Config()

        if log is None:
            log = Logger('loop_dispatch', targets=cfg.log_tgt,
                                          level=cfg.log_lvl)

        self._cfg      = cfg
        self._log      = log
        self._zmq      = zmq.Context()
        self._term     = mt.Event()
        self._closed   = False
        self._clients  = list()
        self._services = list()
        self._registry = None

        self._handle_signals = handle_signals
        self._old_handlers   = dict()


    # --------------------------------------------------------------------------
    #
    @property
    def cfg(self):
        return self._cfg

    @property
    def log(self):
        return self._log

    @property
    def zmq_ctx(self):
        return self._zmq


    # --------------------------------------------------------------------------
    #
    def __enter__(self):

        if self._handle_signals and mt.current_thread() is mt.main_thread():
            for signum in [signal.SIGINT, signal.SIGTERM]:
                self._old_handlers[signum] = signal.signal(signum,
                                                           self._on_signal)
        return self


    def __exit__(self, exc_type, exc_val, exc_tb):

        self.close()


    # --------------------------------------------------------------------------
    #
    def _on_signal(self, signum, frame):

        self._log.warning('caught signal %d, shutting down', signum)
        self.shutdown()


    # --------------------------------------------------------------------------
    #
    def ok(self):
        '''
        True until `shutdown()` was called (or a signal was caught)
        '''
        return not self._term.is_set()


    def shutdown(self):

        self._term.set()


    def sleep(self, seconds):
        '''
        Sleep for `seconds`, but return early on shutdown.  Returns `ok()`.
        '''

        if seconds > 0:
            self._term.wait(seconds)

        return self.ok()


    # --------------------------------------------------------------------------
    #
    @property
    def registry(self):

        if self._registry is None:
            self._registry = RegistryClient(self._cfg.registry_url,
                                            pwd=SERVICE_NS, ctx=self._zmq)
        return self._registry


    def reset_registry(self):
        '''
        drop the registry connection after a failed request
        '''

        if self._registry is not None:
            self._registry.close()
            self._registry = None


    # --------------------------------------------------------------------------
    #
    def create_client(self, service=None):

        client = ServiceClient(self, service or self._cfg.service)
        self._clients.append(client)
        return client


    # --------------------------------------------------------------------------
    #
    def create_service(self, service, cb):
        '''
        Host the callable `cb` as service `service`: start a server which
        handles requests for the command `service` by calling `cb`, and
        announce the server's address in the registry.  The service is
        withdrawn when the context is closed.
        '''

        server = Server(uid=service, log=self._log)
        server.register_request(service, cb)
        server.start()

        try:
            self.registry.put(service, server.addr,
                              timeout=self._cfg.poll_interval)

        except (TimeoutError, RuntimeError, zmq.ZMQError) as e:
            server.stop()
            server.wait()
            self.reset_registry()
            raise ServiceUnavailable('cannot announce service %s: %s'
                                    % (service, e)) from e

        self._log.info('service %s available at %s', service, server.addr)
        self._services.append((service, server))

        return server


    # --------------------------------------------------------------------------
    #
    def close(self):

        if self._closed:
            return

        self._closed = True
        self.shutdown()

        for client in self._clients:
            client.close()

        for service, server in self._services:
            try:
                self.registry.delete(service, timeout=_MIN_ATTEMPT)
            except (TimeoutError, RuntimeError, zmq.ZMQError):
                self._log.warning('could not withdraw service %s', service)
                self.reset_registry()
            server.stop()
            server.wait()

        self.reset_registry()

        for signum, handler in self._old_handlers.items():
            signal.signal(signum, handler)
        self._old_handlers = dict()

        self._zmq.term()


# ------------------------------------------------------------------------------
#
class ServiceClient(object):
    '''
    Client for a named service.  The service endpoint is resolved via the
    registry in `wait_for_service()`, which must succeed before `call()` can
    be used.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, ctx, service):

        self._ctx      = ctx
        self._service  = service
        self._log      = ctx.log
        self._interval = ctx.cfg.poll_interval
        self._client   = None


    # --------------------------------------------------------------------------
    #
    @property
    def service(self):
        return self._service

    @property
    def url(self):
        return self._client.url if self._client else None


    # --------------------------------------------------------------------------
    #
    def _lookup(self, timeout):

        try:
            return self._ctx.registry.get(self._service, timeout=timeout)

        except (TimeoutError, RuntimeError) as e:
            self._log.debug('registry lookup failed: %s', e)
            self._ctx.reset_registry()
            return None

        # a malformed registry url fails permanently
        except (zmq.ZMQError, ValueError, TypeError) as e:
            self._ctx.reset_registry()
            raise ServiceUnavailable('invalid registry url %s: %s'
                                    % (self._ctx.cfg.registry_url, e)) from e


    # --------------------------------------------------------------------------
    #
    def _ping(self, url, timeout):

        if self._client and self._client.url != url:
            self._client.close()
            self._client = None

        if not self._client:
            try:
                self._client = Client(url, ctx=self._ctx.zmq_ctx,
                                      log=self._log)

            except (zmq.ZMQError, ValueError, TypeError) as e:
                raise ServiceUnavailable('service %s registered an invalid '
                                         'address %s: %s'
                                        % (self._service, url, e)) from e

        try:
            self._client.request('echo', timeout=max(timeout, _MIN_ATTEMPT))
            return True

        except (TimeoutError, RuntimeError) as e:
            self._log.debug('service %s at %s not responding: %s',
                            self._service, url, e)
            return False


    # --------------------------------------------------------------------------
    #
    def service_is_ready(self, timeout=None):
        '''
        Check once if the service can be reached, spending at most (about)
        `timeout` seconds (default: one poll interval).
        '''

        if timeout is None:
            timeout = self._interval

        start = time.time()
        url   = self._lookup(timeout)

        if not url:
            return False

        return self._ping(url, timeout - (time.time() - start))


    # --------------------------------------------------------------------------
    #
    def wait_for_service(self, timeout=None):
        '''
        Check for service availability once per poll interval until the
        service can be reached.  Without `timeout`, wait until the context is
        shut down.  Raises `ServiceUnavailable` on shutdown or timeout.
        '''

        start = time.time()
        while True:

            attempt = time.time()
            if self.service_is_ready(self._interval):
                return

            # complete the poll interval
            self._ctx.sleep(self._interval - (time.time() - attempt))

            if not self._ctx.ok():
                raise ServiceUnavailable('client interrupted while waiting '
                                         'for service to appear.')

            if timeout is not None and time.time() - start >= timeout:
                raise ServiceUnavailable('service %s did not appear within '
                                         '%.1f seconds' % (self._service,
                                                           timeout))

            self._log.info('waiting for service to appear...')


    # --------------------------------------------------------------------------
    #
    def call(self, *args, timeout=None, **kwargs):
        '''
        Send a single request to the service and block until its reply
        arrives.  The request is never repeated.  Raises `TransportFailure` if
        the exchange fails, if the context is shut down while waiting, or if no
        reply arrives within `timeout` seconds.
        '''

        if not self._client:
            raise TransportFailure('service %s not connected' % self._service)

        try:
            self._client.send(self._service, *args, **kwargs)

        except zmq.ZMQError as e:
            raise TransportFailure('cannot send request: %s' % e) from e

        start = time.time()
        while True:

            try:
                return self._client.recv(timeout=self._interval)

            except TimeoutError:
                pass

            except (RuntimeError, zmq.ZMQError) as e:
                raise TransportFailure(str(e)) from e

            if not self._ctx.ok():
                self._client.cancel()
                raise TransportFailure('interrupted while waiting for reply')

            if timeout is not None and time.time() - start >= timeout:
                self._client.cancel()
                raise TransportFailure('no reply within %.1f seconds'
                                      % timeout)

            self._log.debug('waiting for reply from %s', self._service)


    # --------------------------------------------------------------------------
    #
    def close(self):

        if self._client:
            self._client.close()
            self._client = None


# ------------------------------------------------------------------------------

