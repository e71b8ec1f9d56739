#!/usr/bin/env python3

# pylint: disable=no-value-for-parameter, protected-access

import time
import zmq

import threading as mt

from unittest import TestCase

from loop_dispatch.zmq import Client, Server


# ------------------------------------------------------------------------------
#
class TestZMQClient(TestCase):

    # --------------------------------------------------------------------------
    #
    def test_client(self):

        with self.assertRaises(ValueError):
            # `url` is not set
            Client(url=None)

        s = Server()
        s.start()

        c = Client(url=s.addr)

        try:
            self.assertEqual(c.url, s.addr)

            echo_str = 'test_echo'
            self.assertEqual(c.request('echo', arg=echo_str), echo_str)

            with self.assertRaises(RuntimeError) as e:
                # unknown attribute for command `echo`
                c.request('echo', wrong_attr=echo_str)
            self.assertIn('TypeError', str(e.exception))
            self.assertIn('unexpected keyword argument', str(e.exception))

            with self.assertRaises(RuntimeError) as e:
                # no command in request
                c.request('')
            self.assertIn('no command in request', str(e.exception))

            with self.assertRaises(RuntimeError) as e:
                c.request('no_registered_cmd')
            self.assertIn('command [no_registered_cmd] unknown',
                          str(e.exception))

        finally:
            c.close()
            s.stop()
            s.wait()

    # --------------------------------------------------------------------------
    #
    def test_pending(self):

        s = Server()
        s.start()

        c = Client(url=s.addr)

        try:
            with self.assertRaises(RuntimeError):
                # nothing sent yet
                c.recv()

            c.send('echo', 'foo')
            self.assertTrue(c.pending)

            with self.assertRaises(RuntimeError):
                # only one request at a time
                c.send('echo', 'bar')

            self.assertEqual(c.recv(timeout=5.0), 'foo')
            self.assertFalse(c.pending)

        finally:
            c.close()
            s.stop()
            s.wait()

    # --------------------------------------------------------------------------
    #
    def test_timeout(self):

        s = Server()
        s.register_request('slow', lambda: time.sleep(0.5) or 'done')
        s.start()

        c = Client(url=s.addr)

        try:
            c.send('slow')

            # the request remains pending after a timeout on `recv()`
            with self.assertRaises(TimeoutError):
                c.recv(timeout=0.1)
            self.assertTrue(c.pending)
            self.assertEqual(c.recv(timeout=5.0), 'done')

            # `request()` cancels on timeout, and the client remains usable
            with self.assertRaises(TimeoutError):
                c.request('slow', timeout=0.1)
            self.assertFalse(c.pending)
            self.assertEqual(c.request('echo', 'ok', timeout=5.0), 'ok')

        finally:
            c.close()
            s.stop()
            s.wait()

    # --------------------------------------------------------------------------
    #
    def test_no_server(self):

        # nothing listens on that port
        with Client(url='tcp://127.0.0.1:1') as c:

            start = time.time()
            with self.assertRaises(TimeoutError):
                c.request('echo', 'foo', timeout=0.2)

            self.assertLess(time.time() - start, 2.0)
            self.assertFalse(c.pending)

    # --------------------------------------------------------------------------
    #
    def test_malformed_url(self):

        ctx = zmq.Context()

        # no transport given
        with self.assertRaises(zmq.ZMQError):
            Client(url='localhost:10001', ctx=ctx)

        # no socket is left behind to block termination
        term = mt.Thread(target=ctx.term, daemon=True)
        term.start()
        term.join(timeout=5.0)
        self.assertFalse(term.is_alive())

        # same for a client owning its context
        with self.assertRaises(zmq.ZMQError):
            Client(url='localhost:10001')


# ------------------------------------------------------------------------------
#
if __name__ == '__main__':

    tc = TestZMQClient()
    tc.test_client()
    tc.test_pending()
    tc.test_timeout()
    tc.test_no_server()
    tc.test_malformed_url()


# ------------------------------------------------------------------------------

