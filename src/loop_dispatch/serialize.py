
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'

# ------------------------------------------------------------------------------
#
# msgpack encoding for the request / reply envelopes.  `TypedDict` instances
# are packed as maps tagged with their class name (`_type`), and unpacked into
# instances of that class again, also when nested in plain containers.
#

import msgpack

from .typeddict import as_dict


# class name -> class, filled by the `TypedDict` metaclass
_classes = dict()


# ------------------------------------------------------------------------------
#
def register_serializable(cls):

    _classes[cls.__name__] = cls


def _restore(obj):

    cls = _classes.get(obj.get('_type'))
    if cls is None:
        return obj

    del obj['_type']
    return cls(from_dict=obj)


# ------------------------------------------------------------------------------
#
def to_msgpack(data):
    '''
    pack `data` into bytes, tagging typed dicts with their class
    '''

    return msgpack.packb(as_dict(data, _annotate=True), use_bin_type=True)


def from_msgpack(data):
    '''
    unpack bytes created by `to_msgpack()`, restoring typed dicts
    '''

    return msgpack.unpackb(data, object_hook=_restore, raw=False)


# ------------------------------------------------------------------------------

