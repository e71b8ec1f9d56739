
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'

# ------------------------------------------------------------------------------
#
# Submit a single loop task to the task dispatcher:
#
#   loop-dispatch -s <start> -f <finish> -n <loop_num>
#
# The submitter waits for the dispatcher's `submit_task` service to appear,
# sends one request and reports the dispatcher's answer.  The process exits
# with `0` if the task was accepted, and with `1` on any failure.
#

import os
import sys
import optparse
import contextlib

from .typeddict import TypedDict, SchemaKeyError, SchemaTypeError
from .config    import Config
from .logger    import Logger
from .context   import Context
from .messages  import SubmissionResponse, make_loop_request
from .errors    import DispatchError, UsageError, HelpRequested
from .errors    import ServiceUnavailable, TransportFailure, BusinessFailure


# the three required options and their values
MIN_ARGS = 6

HELP_OPTS = ['-h', '--help']

# submitter states
START               = 'START'
WAITING_FOR_SERVICE = 'WAITING_FOR_SERVICE'
REQUEST_SENT        = 'REQUEST_SENT'
RESPONSE_RECEIVED   = 'RESPONSE_RECEIVED'
SUCCESS_EXIT        = 'SUCCESS_EXIT'
FAILURE_EXIT        = 'FAILURE_EXIT'

_TRANSITIONS = {START              : [WAITING_FOR_SERVICE, FAILURE_EXIT],
                WAITING_FOR_SERVICE: [REQUEST_SENT,        FAILURE_EXIT],
                REQUEST_SENT       : [RESPONSE_RECEIVED,   FAILURE_EXIT],
                RESPONSE_RECEIVED  : [SUCCESS_EXIT,        FAILURE_EXIT],
                SUCCESS_EXIT       : [],
                FAILURE_EXIT       : []}


# ------------------------------------------------------------------------------
#
class InvocationArgs(TypedDict):

    _schema = {
        'start'   : str,
        'finish'  : str,
        'loop_num': int,
        'registry': str,
        'service' : str,
        'timeout' : float,
        'config'  : str,
    }

    _defaults = {
        'start'   : '',
        'finish'  : '',
        'loop_num': 0,
        'registry': None,
        'service' : None,
        'timeout' : None,
        'config'  : None,
    }


# ------------------------------------------------------------------------------
#
def usage(name, msg=None):

    if msg:
        sys.stderr.write('%s\n' % msg)

    sys.stderr.write('Usage: %s\n'
                     'Options:\n'
                     '\t-h,--help\t\tShow this help message\n'
                     '\t-s,--start\t\tSpecify the start waypoint\n'
                     '\t-f,--finish\t\tSpecify the end waypoint\n'
                     '\t-n,--loop_num\t\tSpecify the number of loops\n'
                     '\t-r,--registry\t\tSpecify the registry url\n'
                     '\t--service\t\tSpecify the submission service name\n'
                     '\t-t,--timeout\t\tSpecify the seconds to wait for the '
                     'service (default: wait until interrupted)\n'
                     '\t-c,--config\t\tSpecify a config file\n'
                     '\n' % name)


# ------------------------------------------------------------------------------
#
class _OptionParser(optparse.OptionParser):

    def error(self, msg):
        raise UsageError(msg)


def _get_parser():

    parser = _OptionParser(add_help_option=False)

    parser.add_option('-s', '--start',    dest='start')
    parser.add_option('-f', '--finish',   dest='finish')
    parser.add_option('-n', '--loop_num', dest='loop_num')
    parser.add_option('-r', '--registry', dest='registry')
    parser.add_option(      '--service',  dest='service')
    parser.add_option('-t', '--timeout',  dest='timeout')
    parser.add_option('-c', '--config',   dest='config')

    return parser


# ------------------------------------------------------------------------------
#
def parse_args(argv):
    '''
    Parse the command line tokens `argv` (without program name) into
    `InvocationArgs`.  Raises `HelpRequested` if `-h` is given anywhere on the
    command line (regardless of other errors), and `UsageError` for an invalid
    or too short command line.  Options which are not given are left at their
    (empty) defaults.
    '''

    if any(arg in HELP_OPTS for arg in argv):
        raise HelpRequested()

    if len(argv) < MIN_ARGS:
        raise UsageError('You might have missing input variables')

    options, args = _get_parser().parse_args(list(argv))

    if args:
        raise UsageError('unexpected arguments: %s' % ' '.join(args))

    ret = InvocationArgs()

    if options.start  is not None: ret.start  = options.start
    if options.finish is not None: ret.finish = options.finish

    if options.loop_num is not None:
        try:
            ret.loop_num = int(options.loop_num)
        except ValueError as e:
            raise UsageError('invalid number of loops: %s'
                             % options.loop_num) from e
        if ret.loop_num < 0:
            raise UsageError('invalid number of loops: %s' % ret.loop_num)

    if options.timeout is not None:
        try:
            ret.timeout = float(options.timeout)
        except ValueError as e:
            raise UsageError('invalid timeout: %s' % options.timeout) from e

    ret.registry = options.registry
    ret.service  = options.service
    ret.config   = options.config

    return ret


# ------------------------------------------------------------------------------
#
def build_request(args, now=None):
    '''
    Create the submission request for the loop task described by `args`.
    '''

    return make_loop_request(start=args.start,
                             finish=args.finish,
                             num_loops=args.loop_num,
                             now=now)


# ------------------------------------------------------------------------------
#
def load_config(args, env=None):
    '''
    Load the submitter config, with command line options taking precedence.
    '''

    overrides = dict()

    if args.registry          : overrides['registry_url'] = args.registry
    if args.service           : overrides['service']      = args.service
    if args.timeout is not None: overrides['wait_timeout'] = args.timeout

    return Config(path=args.config, cfg=overrides, env=env)


# ------------------------------------------------------------------------------
#
class TaskSubmitter(object):
    '''
    Submit one loop task and translate the outcome into an exit code.  If no
    messaging context `ctx` is given, the submitter creates (and closes) its
    own.
    '''

    # --------------------------------------------------------------------------
    #
    def __init__(self, args, cfg, log, ctx=None):

        self._args  = args
        self._cfg   = cfg
        self._log   = log
        self._ctx   = ctx
        self._state = START

        self.request  = None
        self.response = None


    # --------------------------------------------------------------------------
    #
    @property
    def state(self):
        return self._state


    def _advance(self, state):

        if state not in _TRANSITIONS[self._state]:
            raise RuntimeError('invalid transition %s -> %s'
                              % (self._state, state))

        self._log.debug('state: %s -> %s', self._state, state)
        self._state = state


    # --------------------------------------------------------------------------
    #
    def run(self):
        '''
        Submit the task, return the process exit code.
        '''

        if self._state != START:
            raise RuntimeError('a submitter sends its request only once')

        if self._ctx: ctx = contextlib.nullcontext(self._ctx)
        else        : ctx = Context(self._cfg, self._log)

        try:
            with ctx as _ctx:
                self._submit(_ctx)

        except BusinessFailure as e:
            self._log.error(e.response.message)
            self._log.error("the task ID was '%s'", e.response.task_id)
            self._advance(FAILURE_EXIT)
            return e.exit_code

        except ServiceUnavailable as e:
            self._log.error(str(e))
            self._advance(FAILURE_EXIT)
            return e.exit_code

        except TransportFailure as e:
            self._log.error('service call failed: %s', e)
            self._advance(FAILURE_EXIT)
            return e.exit_code

        self._log.info("service call successful, the task ID to watch is '%s'",
                       self.response.task_id)
        self._advance(SUCCESS_EXIT)
        return 0


    # --------------------------------------------------------------------------
    #
    def _submit(self, ctx):

        self._advance(WAITING_FOR_SERVICE)

        client = ctx.create_client(self._cfg.service)
        client.wait_for_service(timeout=self._cfg.wait_timeout)

        self.request = build_request(self._args)

        self._log.info('Submitting Loop Request')
        self._log.debug('request: %s', self.request)

        self._advance(REQUEST_SENT)
        res = client.call(self.request, timeout=self._cfg.call_timeout)
        self._advance(RESPONSE_RECEIVED)

        if not isinstance(res, dict):
            raise TransportFailure('invalid reply: %s' % res)

        try:
            self.response = SubmissionResponse(from_dict=res).verify()
        except (SchemaKeyError, SchemaTypeError) as e:
            raise TransportFailure('invalid reply: %s' % e) from e

        if not self.response.success:
            raise BusinessFailure(self.response)


# ------------------------------------------------------------------------------
#
def main(argv=None):

    if argv is None:
        argv = sys.argv

    name = os.path.basename(argv[0]) if argv else 'loop-dispatch'

    try:
        args = parse_args(argv[1:])

    except HelpRequested as e:
        usage(name)
        return e.exit_code

    except UsageError as e:
        usage(name, str(e))
        return e.exit_code

    try:
        cfg = load_config(args)

    except (ValueError, OSError, SchemaKeyError, SchemaTypeError) as e:
        sys.stderr.write('invalid configuration: %s\n' % e)
        return DispatchError.exit_code

    log = Logger('loop_dispatch', targets=cfg.log_tgt, level=cfg.log_lvl)

    try:
        return TaskSubmitter(args, cfg, log).run()

    finally:
        log.close()


# ------------------------------------------------------------------------------

