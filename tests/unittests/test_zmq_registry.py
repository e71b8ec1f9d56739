#!/usr/bin/env python3

import loop_dispatch as ld


# ------------------------------------------------------------------------------
#
def test_zmq_registry():

    c = None
    r = ld.zmq.Registry()
    r.start()

    try:
        assert r.addr
        c = ld.zmq.RegistryClient(url=r.addr)

        c.put('foo.bar.buz', {'biz': 42})
        assert c.get('foo') == {'bar': {'buz': {'biz': 42}}}
        assert c.get('foo.bar.buz.biz') == 42
        assert c.get('foo.bar.buz.biz.boz') is None
        assert c.get('foo.bar.buz.biz.boz', default=3) == 3
        assert c.get('nothing.here') is None

        # a value is replaced by a path through it
        c.put('foo.bar.buz.biz.boz', 1)
        assert c.get('foo.bar.buz') == {'biz': {'boz': 1}}

        c.delete('foo')
        assert c.get('foo') is None

        # deleting a missing key is not an error
        c.delete('foo.bar')

    finally:

        if c:
            c.close()

        r.stop()
        r.wait()


# ------------------------------------------------------------------------------
#
def test_zmq_registry_pwd():

    r = ld.zmq.Registry()
    r.start()

    c1 = ld.zmq.RegistryClient(url=r.addr)
    c2 = ld.zmq.RegistryClient(url=r.addr, pwd='services')

    try:
        c2.put('submit_task', 'tcp://127.0.0.1:12345')

        assert c1.get('services.submit_task') == 'tcp://127.0.0.1:12345'
        assert c2.get('submit_task')          == 'tcp://127.0.0.1:12345'

        c2.delete('submit_task')
        assert c1.get('services') == {}

    finally:
        c1.close()
        c2.close()
        r.stop()
        r.wait()


# ------------------------------------------------------------------------------
# run tests if called directly
if __name__ == '__main__':

    test_zmq_registry()
    test_zmq_registry_pwd()


# ------------------------------------------------------------------------------

