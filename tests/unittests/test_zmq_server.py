#!/usr/bin/env python3

# pylint: disable=no-value-for-parameter, protected-access

from typing   import Any, List, Dict
from unittest import mock, TestCase

import loop_dispatch as ld

from loop_dispatch.zmq import Server, Client


# --------------------------------------------------------------------------
#
class MyZMQServer(ld.zmq.Server):

    def __init__(self):

        ld.zmq.Server.__init__(self)

        self.register_request('test_0', self._test_0)
        self.register_request('test_1', self._test_1)
        self.register_request('test_2', self._test_2)
        self.register_request('test_3', self._test_3)
        self.register_request('test_4', self._test_4)


    def _test_0(self) -> str:
        return 'default'


    def _test_1(self, foo: Any = None) -> Any:
        return foo


    def _test_2(self, foo: Any,
                      bar: Any) -> List[Any]:
        return [foo, bar]


    def _test_3(self, foo: Any,
                      bar: Any = 'default') -> Dict[str, Any]:
        return {'foo': foo,
                'bar': bar}


    def _test_4(self, *args, **kwargs) -> List[Any]:
        return list(args) + list(kwargs.values())


# ------------------------------------------------------------------------------
#
class TestZMQServer(TestCase):

    # --------------------------------------------------------------------------
    #
    def test_init(self):

        s = Server()
        self.assertTrue  (s.uid.startswith('server'))
        self.assertIsNone(s.addr)
        self.assertIsNone(s._url)

        self.assertFalse(s._up.is_set())
        self.assertFalse(s._term.is_set())

        uid = 'test.server'
        s = Server(uid=uid)
        self.assertEqual(s.uid, uid)

        # default callbacks
        self.assertIn('echo', s._cbs)
        self.assertEqual(s._cbs['echo']('test_echo'), 'test_echo')
        self.assertIsNone(s._cbs['echo']())

    # --------------------------------------------------------------------------
    #
    @mock.patch.object(Server, '__init__', return_value=None)
    def test_exec_output(self, mocked_init):

        s = Server()

        response_msg = 'response-00'
        output = s._success(res=response_msg)
        self.assertIsInstance(output, dict)
        self.assertIsNone(output['err'])
        self.assertIsNone(output['exc'])
        self.assertEqual (output['res'], response_msg)

        error_msg, exception_msg = 'error-00', 'exception-00'
        output = s._error(err=error_msg, exc=exception_msg)
        self.assertEqual (output['err'], error_msg)
        self.assertEqual (output['exc'], exception_msg)
        self.assertIsNone(output['res'])

        output = s._error()
        self.assertEqual(output['err'], 'invalid request')

    # --------------------------------------------------------------------------
    #
    def test_start(self):

        s = Server()
        s.start()

        try:
            self.assertTrue(s._up.is_set())
            self.assertTrue(s.addr.startswith('tcp://127.0.0.1:'))

            with self.assertRaises(RuntimeError):
                # `start()` can be called only once
                s.start()

        finally:
            s.stop()
            s.wait()

        self.assertTrue(s._term.is_set())

    # --------------------------------------------------------------------------
    #
    def test_start_failure(self):

        s1 = Server()
        s1.start()

        try:
            # address is in use
            s2 = Server(url=s1.addr)
            with self.assertRaises(RuntimeError):
                s2.start()

        finally:
            s1.stop()
            s1.wait()

    # --------------------------------------------------------------------------
    #
    def test_requests(self):

        s = MyZMQServer()
        s.start()

        c = Client(url=s.addr)

        try:
            self.assertEqual(c.request('test_0'), 'default')
            self.assertEqual(c.request('test_1', foo='bar'), 'bar')
            self.assertEqual(c.request('test_2', 1, bar=2), [1, 2])
            self.assertEqual(c.request('test_3', foo=3), {'foo': 3,
                                                          'bar': 'default'})
            self.assertEqual(c.request('test_4', 1, 2, x=3), [1, 2, 3])

            with self.assertRaises(RuntimeError) as e:
                c.request('test_2', 1)
            self.assertIn('TypeError', str(e.exception))

        finally:
            c.close()
            s.stop()
            s.wait()


# ------------------------------------------------------------------------------
#
if __name__ == '__main__':

    tc = TestZMQServer()
    tc.test_init()
    tc.test_exec_output()
    tc.test_start()
    tc.test_start_failure()
    tc.test_requests()


# ------------------------------------------------------------------------------

