
# flake8: noqa: F401

__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


import os as _os

from .errors    import DispatchError, UsageError, HelpRequested
from .errors    import ServiceUnavailable, TransportFailure, BusinessFailure
from .typeddict import TypedDict, as_dict
from .config    import Config
from .logger    import Logger
from .messages  import Time, Priority, TaskType, Loop, TaskDescription
from .messages  import SubmissionRequest, SubmissionResponse
from .messages  import make_loop_request, REQUESTER, TYPE_LOOP
from .context   import Context, ServiceClient
from .submitter import TaskSubmitter, InvocationArgs
from .submitter import parse_args, build_request, main

from . import zmq


# ------------------------------------------------------------------------------
#
# get version info
#
_mod_root = _os.path.dirname(__file__)

with open('%s/VERSION' % _mod_root, 'r', encoding='utf-8') as _fin:
    version = _fin.readline().strip()

__version__ = version


# ------------------------------------------------------------------------------
