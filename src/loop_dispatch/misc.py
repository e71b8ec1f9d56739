
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import os
import re


# `${NAME}` or `${NAME:default}`
_env_ref = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}')


# ------------------------------------------------------------------------------
#
def to_type(data):
    '''
    convert numeric strings to `int` or `float`, leave anything else alone
    '''

    if isinstance(data, str):
        for t in [int, float]:
            try:
                return t(data)
            except ValueError:
                pass

    return data


# ------------------------------------------------------------------------------
#
def name2env(name):

    return name.replace('.', '_').upper()


# ------------------------------------------------------------------------------
#
def get_env_ns(key, ns, default=None):
    '''
    Look up the setting `key` in the environment, within the name space `ns`,
    most specific name first.  For `key='log_lvl'` and
    `ns='loop_dispatch.submitter'`, the checked variables are

        LOOP_DISPATCH_SUBMITTER_LOG_LVL
        LOOP_DISPATCH_LOG_LVL
        LOOP_LOG_LVL

    Returns `default` if none of them is set.
    '''

    elems = name2env(ns).split('_')
    key   = name2env(key)

    for n in range(len(elems), 0, -1):
        name = '_'.join(elems[:n] + [key])
        if name in os.environ:
            return os.environ[name]

    return default


# ------------------------------------------------------------------------------
#
def expand_env(data, env=None, ignore_missing=True):
    '''
    Replace variable references in `data` with values from `env` (default:
    `os.environ`).  Dicts and lists are expanded in place, strings are
    returned expanded, anything else is returned unaltered.  With
    `export BAR=bar BIZ=biz`:

        foo_${BAR}_baz       -> foo_bar_baz
        foo_${BUZ:buz}_baz   -> foo_buz_baz
        foo_${BUZ:$BIZ}_baz  -> foo_biz_baz
        foo_${BUZ}_baz       -> foo__baz
        ${BUZ}               -> None

    An unset variable without default raises `ValueError` unless
    `ignore_missing` is set.  Numeric results are converted to numbers.
    '''

    if env is None:
        env = os.environ

    if isinstance(data, dict):
        for k in data:
            data[k] = expand_env(data[k], env, ignore_missing)
        return data

    if isinstance(data, list):
        data[:] = [expand_env(v, env, ignore_missing) for v in data]
        return data

    if not isinstance(data, str) or '${' not in data:
        return data

    def _value(match):

        name, default = match.groups()

        if name in env:
            return env[name]

        if default is None:
            if not ignore_missing:
                raise ValueError('cannot expand ${%s}' % name)
            return ''

        if default.startswith('$'):
            return env.get(default[1:], '')

        return default

    ret = _env_ref.sub(_value, data)

    if not ret and _env_ref.fullmatch(data):
        return None

    return to_type(ret)


# ------------------------------------------------------------------------------

