
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import zmq
import errno


_MAX_INTR = 3   # retries of an interrupted zmq call


# ------------------------------------------------------------------------------
#
def no_intr(f, *args, **kwargs):
    '''
    Call `f`, repeating the call if a signal interrupted it (`EINTR`).
    Returns `None` if the zmq context was terminated meanwhile.
    '''

    for attempt in range(_MAX_INTR + 1):

        try:
            return f(*args, **kwargs)

        except zmq.ContextTerminated:
            return None

        except zmq.ZMQError as e:
            if e.errno != errno.EINTR or attempt == _MAX_INTR:
                raise


# ------------------------------------------------------------------------------
#
def zmq_bind(sock, url=None):
    '''
    Bind `sock` to `url`, or to a random free port on all interfaces, and
    return the address to connect to.
    '''

    if url: sock.bind(url)
    else  : sock.bind_to_random_port('tcp://*')

    addr = sock.getsockopt_string(zmq.LAST_ENDPOINT)

    # a wildcard bind is not a valid connect address
    return addr.replace('0.0.0.0', '127.0.0.1')


# ------------------------------------------------------------------------------

