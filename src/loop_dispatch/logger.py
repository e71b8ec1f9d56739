
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import os
import sys
import logging
import colorama

from .misc import get_env_ns


CRITICAL = logging.CRITICAL
ERROR    = logging.ERROR
WARNING  = logging.WARNING
INFO     = logging.INFO
DEBUG    = logging.DEBUG
OFF      = CRITICAL + 10

DEFAULT_LEVEL  = 'INFO'
DEFAULT_TARGET = 'stdout'

_FORMAT  = '%(asctime)s : %(name)-20s : %(levelname)-8s : %(message)s'
_LEVELS  = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL', 'OFF']
_NULL    = ['0', 'null']
_STDOUT  = ['-', '1', 'stdout']
_STDERR  = ['=', '2', 'stderr']
_COLORS  = {'DEBUG'   : colorama.Fore.CYAN,
            'INFO'    : colorama.Fore.GREEN,
            'WARNING' : colorama.Fore.YELLOW,
            'ERROR'   : colorama.Fore.RED,
            'CRITICAL': colorama.Back.RED + colorama.Fore.WHITE}


# ------------------------------------------------------------------------------
#
class ColorStreamHandler(logging.StreamHandler):
    '''
    colors records by level, but only when writing to a terminal
    '''

    def format(self, record):

        msg = super().format(record)

        if getattr(self.stream, 'isatty', None) and self.stream.isatty():
            msg = '%s%s%s' % (_COLORS.get(record.levelname, ''), msg,
                              colorama.Style.RESET_ALL)
        return msg


# ------------------------------------------------------------------------------
#
def _level_name(level):

    # numeric levels (`10`, `'20'`) map to their names
    level = str(level).upper()
    if level.isdigit():
        level = logging.getLevelName(int(level)) if int(level) < OFF else 'OFF'

    return level


def _handler(target, path, name):

    if target in _NULL  : return logging.NullHandler()
    if target in _STDOUT: return ColorStreamHandler(sys.stdout)
    if target in _STDERR: return ColorStreamHandler(sys.stderr)

    if target == '.': fname = os.path.join(path, '%s.log' % name)
    else            : fname = os.path.join(path, target)

    os.makedirs(os.path.dirname(os.path.abspath(fname)), exist_ok=True)
    return logging.FileHandler(fname, delay=True)


# ------------------------------------------------------------------------------
#
class Logger(object):
    '''
    A named log handle.

    `targets` is a comma separated string (or a list) of

        `0`, `null`          : discard
        `-`, `1`, `stdout`   : stdout (colored on a tty)
        `=`, `2`, `stderr`   : stderr (colored on a tty)
        `.`                  : file `<path>/<name>.log`
        <string>             : file <string>, relative to `path`

    and `level` is one of DEBUG, INFO, WARNING, ERROR, CRITICAL, OFF (or the
    respective number).  If not given, both are looked up in the environment
    name space `ns` (default: `name`), e.g. for `ns='loop_dispatch'`:

        LOOP_DISPATCH_LOG_TGT, LOOP_LOG_TGT
        LOOP_DISPATCH_LOG_LVL, LOOP_LOG_LVL

    and otherwise default to `stdout` and `INFO`.  All other attribute access
    (`info()`, `isEnabledFor()`, ...) is forwarded to the `logging.Logger`.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, name, ns=None, path=None, targets=None, level=None):

        if not name:
            raise ValueError('a logger needs a name')

        self._name = name
        self._ns   = ns   or name
        self._path = path or os.getcwd()

        if not level:
            level = get_env_ns('log_lvl', self._ns, DEFAULT_LEVEL)

        if not targets:
            targets = get_env_ns('log_tgt', self._ns, DEFAULT_TARGET)

        if isinstance(targets, str):
            targets = targets.split(',')

        self._level = _level_name(level)
        invalid     = self._level not in _LEVELS
        if invalid:
            self._level = DEFAULT_LEVEL

        if self._level == 'OFF':
            targets = ['null']

        self._targets  = [t.strip() for t in targets]
        self._handlers = list()

        self._logger = logging.getLogger(name)
        self._logger.propagate = False

        if self._level == 'OFF': self._logger.setLevel(OFF)
        else                   : self._logger.setLevel(self._level)

        # a second handle on the same logger shares the first one's handlers
        if not self._logger.handlers:
            formatter = logging.Formatter(_FORMAT)
            for target in self._targets:
                handler = _handler(target, self._path, name)
                handler.setFormatter(formatter)
                self._logger.addHandler(handler)
                self._handlers.append(handler)

        if invalid:
            self._logger.warning("invalid log level '%s', using '%s'",
                                 level, DEFAULT_LEVEL)


    # --------------------------------------------------------------------------
    #
    @property
    def name(self):
        return self._name

    @property
    def ns(self):
        return self._ns

    @property
    def path(self):
        return self._path

    @property
    def level(self):
        return self._level

    @property
    def targets(self):
        return self._targets


    # --------------------------------------------------------------------------
    #
    def __getattr__(self, name):

        if name.startswith('_'):
            raise AttributeError(name)

        return getattr(self._logger, name)


    # --------------------------------------------------------------------------
    #
    def close(self):
        '''
        close and detach the handlers this handle created
        '''

        for handler in self._handlers:
            handler.close()
            self._logger.removeHandler(handler)

        self._handlers = list()


# ------------------------------------------------------------------------------

