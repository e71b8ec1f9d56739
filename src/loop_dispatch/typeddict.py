
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'

# ------------------------------------------------------------------------------
#
# Schema-declared dictionaries for the messages exchanged with the dispatcher
# and for the submitter configuration.  A subclass declares
#
#   _schema   : {key: type}, with `str`, `int`, `float`, `bool` or another
#               `TypedDict` subclass (a nested section) as type
#   _defaults : {key: value}
#
# Both are inherited from base classes.  Keys are readable and writable as
# attributes, sub-dicts assigned to a nested section are converted to the
# section's type, and `verify()` checks (and casts) all values.  Every
# subclass is registered for msgpack round trips (see `serialize.py`).
#

import copy


_TRUE  = ('true',  'yes', '1')
_FALSE = ('false', 'no',  '0')


# ------------------------------------------------------------------------------
#
class SchemaKeyError(KeyError):
    pass


class SchemaTypeError(TypeError):
    pass


# ------------------------------------------------------------------------------
#
class TypedDictMeta(type):

    def __new__(mcs, name, bases, namespace):

        schema   = dict()
        defaults = dict()

        for base in reversed(bases):
            schema.update(getattr(base, '_schema', {}))
            defaults.update(getattr(base, '_defaults', {}))

        schema.update(namespace.get('_schema', {}))
        defaults.update(namespace.get('_defaults', {}))

        namespace['_schema']   = schema
        namespace['_defaults'] = defaults

        cls = super().__new__(mcs, name, bases, namespace)

        if bases != (dict,):
            from .serialize import register_serializable
            register_serializable(cls)

        return cls


def _is_section(t):

    return isinstance(t, type) and issubclass(t, TypedDict)


# ------------------------------------------------------------------------------
#
class TypedDict(dict, metaclass=TypedDictMeta):
    '''
    Values live in `self._data`, the inherited dict storage stays empty: use
    `as_dict()` to obtain plain python data.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, from_dict=None, **kwargs):

        super().__init__()
        object.__setattr__(self, '_data', dict())

        self.update(copy.deepcopy(self._defaults))
        self.update(from_dict)
        self.update(kwargs)


    def __deepcopy__(self, memo):

        return type(self)(from_dict=copy.deepcopy(self._data, memo))


    # --------------------------------------------------------------------------
    #
    def __setitem__(self, k, v):

        t = self._schema.get(k)
        if _is_section(t) and isinstance(v, dict) and not isinstance(v, t):
            v = t(from_dict=v)

        self._data[k] = v

    def __getitem__(self, k):
        return self._data[k]

    def __delitem__(self, k):
        del self._data[k]

    def __contains__(self, k):
        return k in self._data

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def update(self, other=None, **kwargs):

        for src in [other or {}, kwargs]:
            for k, v in src.items():
                self[k] = v

    def keys(self):
        return self._data.keys()

    def values(self):
        return self._data.values()

    def items(self):
        return self._data.items()

    def get(self, k, default=None):
        return self._data.get(k, default)


    # --------------------------------------------------------------------------
    #
    # schema keys which are not set read as `None`
    #
    def __getattr__(self, k):

        if k.startswith('_'):
            raise AttributeError(k)

        data = self.__dict__.get('_data', {})
        if k in data:
            return data[k]

        if k in self._schema:
            return None

        raise AttributeError('%s has no attribute "%s"'
                            % (type(self).__name__, k))

    def __setattr__(self, k, v):

        if k.startswith('_'):
            object.__setattr__(self, k, v)
        else:
            self[k] = v


    # --------------------------------------------------------------------------
    #
    def __eq__(self, other):

        if isinstance(other, TypedDict):
            other = other.as_dict()
        return self.as_dict() == other

    def __ne__(self, other):
        return not self == other

    __hash__ = None

    def __str__(self):
        return str(self._data)

    def __repr__(self):
        return '%s: %s' % (type(self).__name__, self)


    # --------------------------------------------------------------------------
    #
    def as_dict(self, _annotate=False):

        return as_dict(self, _annotate)


    # --------------------------------------------------------------------------
    #
    def verify(self):
        '''
        Check all values against the schema, casting where possible (`'5'` for
        an `int` becomes `5`).  Unknown keys raise a `SchemaKeyError`, values
        which cannot be cast raise a `SchemaTypeError`.  Subclasses add their
        own checks in `_verify()`.  Returns `self`.
        '''

        for k, v in list(self._data.items()):

            if k not in self._schema:
                raise SchemaKeyError('%s: unknown key "%s"'
                                    % (type(self).__name__, k))

            self._data[k] = self._cast(k, v, self._schema[k])

        self._verify()
        return self


    def _verify(self):
        pass


    @classmethod
    def _cast(cls, k, v, t):

        if v is None:
            return None

        if _is_section(t):
            if isinstance(v, t):
                return v.verify()
            if isinstance(v, dict):
                return t(from_dict=v).verify()

        elif t is bool:
            if isinstance(v, bool)      : return v
            if str(v).lower() in _TRUE  : return True
            if str(v).lower() in _FALSE : return False

        # bool is an int subclass, but no valid value for other types
        elif not isinstance(v, bool):
            if isinstance(v, t):
                return v
            try:
                return t(v)
            except (TypeError, ValueError):
                pass

        raise SchemaTypeError('%s.%s: expected %s, got %s (%r)'
                             % (cls.__name__, k, t.__name__,
                                type(v).__name__, v))


# ------------------------------------------------------------------------------
#
def as_dict(src, _annotate=False):
    '''
    Convert typed dicts (also when nested in dicts, lists or tuples) into
    plain python data.  With `_annotate`, each converted typed dict carries
    its class name under the `_type` key so that it can be restored on
    deserialization.
    '''

    if isinstance(src, TypedDict):
        ret = {k: as_dict(v, _annotate) for k, v in src.items()}
        if _annotate:
            ret['_type'] = type(src).__name__
        return ret

    if isinstance(src, dict):
        return {k: as_dict(v, _annotate) for k, v in src.items()}

    if isinstance(src, (list, tuple)):
        return [as_dict(v, _annotate) for v in src]

    return src


# ------------------------------------------------------------------------------

