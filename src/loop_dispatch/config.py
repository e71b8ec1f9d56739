
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


# ------------------------------------------------------------------------------
#
# The submitter configuration is assembled from the following layers, later
# layers overwriting earlier ones:
#
#   - the installed default config (`configs/submitter_default.json` in this
#     module's directory)
#   - a user config, if it exists:
#       `$LOOP_DISPATCH_CONFIG_USER_DIR/submitter.json`, or
#       `$HOME/.loop_dispatch/configs/submitter.json`
#   - an application config file given by path
#   - an application config dict
#
# Config files are json, with python style comment lines filtered out before
# parsing.  After merging, string values of the form
#
#   '${LOOP_DISPATCH_REGISTRY_URL:tcp://localhost:10001}'
#
# are expanded via `os.environ` (see `misc.expand_env()`), and all values are
# verified against the config schema.
#
# ------------------------------------------------------------------------------

import os
import json

from .misc      import expand_env
from .typeddict import TypedDict


_mod_root = os.path.dirname(__file__)


# ------------------------------------------------------------------------------
#
class Config(TypedDict):

    _schema = {
        'registry_url' : str,
        'service'      : str,
        'poll_interval': float,
        'wait_timeout' : float,
        'call_timeout' : float,
        'log_lvl'      : str,
        'log_tgt'      : str,
    }

    _defaults = {
        'registry_url' : 'tcp://localhost:10001',
        'service'      : 'submit_task',
        'poll_interval': 1.0,
        'wait_timeout' : None,
        'call_timeout' : None,
        'log_lvl'      : 'INFO',
        'log_tgt'      : 'stdout',
    }


    # --------------------------------------------------------------------------
    #
    def __init__(self, from_dict=None, path=None, cfg=None, env=None,
                       name='submitter'):
        '''
        Load the config named `name` from the layers listed above.  Use
        `from_dict` to create a config from a plain dict only, without reading
        any config files.
        '''

        if from_dict is not None:
            super().__init__(from_dict=from_dict)
            return

        super().__init__()

        sys_fname = '%s/configs/%s_default.json' % (_mod_root, name)
        usr_fname = '%s/%s.json' % (usr_config_dir(env), name)

        for fname in [sys_fname, usr_fname, path]:
            if fname and os.path.isfile(fname):
                self.update(read_cfg(fname))

        if cfg:
            self.update(cfg)

        expand_env(self._data, env)

        self.verify()


    # --------------------------------------------------------------------------
    #
    def _verify(self):

        if not self.registry_url:
            raise ValueError('registry_url not set')

        if not self.service:
            raise ValueError('service not set')

        if self.poll_interval is None or self.poll_interval <= 0:
            raise ValueError('poll_interval must be positive')


# ------------------------------------------------------------------------------
#
def read_cfg(fname):
    '''
    read a json config file, skipping lines which start with `#`
    '''

    with open(fname, 'r', encoding='utf-8') as fin:
        lines = [line for line in fin if not line.lstrip().startswith('#')]

    try:
        return json.loads(''.join(lines))

    except ValueError as e:
        raise ValueError('invalid config file %s: %s' % (fname, e)) from e


# ------------------------------------------------------------------------------
#
def usr_config_dir(env=None):

    if env is None:
        env = os.environ

    usr_dir = env.get('LOOP_DISPATCH_CONFIG_USER_DIR')
    if usr_dir:
        return usr_dir

    return '%s/.loop_dispatch/configs' % env.get('HOME', '/tmp')


# ------------------------------------------------------------------------------

