
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'

# ------------------------------------------------------------------------------
#
# Message types exchanged with the task dispatcher's `submit_task` service.
# The layout follows the dispatcher's task description schema: a task
# description carries a start time, a priority, a task type and one payload
# section per task type.  This client only ever fills the `loop` section.
#

import time

from .typeddict import TypedDict


# ------------------------------------------------------------------------------
#
REQUESTER = 'py_loop_dispatcher_script'

SUBMIT_TASK = 'submit_task'

# task types known to the dispatcher
TYPE_STATION        = 0
TYPE_LOOP           = 1
TYPE_DELIVERY       = 2
TYPE_CHARGE_BATTERY = 3
TYPE_CLEAN          = 4
TYPE_PATROL         = 5

DEFAULT_PRIORITY    = 0


# ------------------------------------------------------------------------------
#
class Time(TypedDict):

    _schema = {
        'sec'    : int,
        'nanosec': int,
    }

    _defaults = {
        'sec'    : 0,
        'nanosec': 0,
    }

    # --------------------------------------------------------------------------
    #
    @classmethod
    def now(cls):

        ns = time.time_ns()
        return cls(sec=ns // 1_000_000_000, nanosec=ns % 1_000_000_000)


# ------------------------------------------------------------------------------
#
class Priority(TypedDict):

    _schema   = {'value': int}
    _defaults = {'value': DEFAULT_PRIORITY}


# ------------------------------------------------------------------------------
#
class TaskType(TypedDict):

    _schema   = {'type': int}
    _defaults = {'type': TYPE_STATION}


# ------------------------------------------------------------------------------
#
class Loop(TypedDict):
    '''
    Payload of a loop task: travel `num_loops` times between the waypoints
    `start_name` and `finish_name`.  `task_id` and `robot_type` are assigned by
    the dispatcher and are left empty by the submitting client.
    '''

    _schema = {
        'task_id'    : str,
        'robot_type' : str,
        'num_loops'  : int,
        'start_name' : str,
        'finish_name': str,
    }

    _defaults = {
        'task_id'    : '',
        'robot_type' : '',
        'num_loops'  : 0,
        'start_name' : '',
        'finish_name': '',
    }


# ------------------------------------------------------------------------------
#
class TaskDescription(TypedDict):

    _schema = {
        'start_time': Time,
        'priority'  : Priority,
        'task_type' : TaskType,
        'loop'      : Loop,
    }

    _defaults = {
        'start_time': Time(),
        'priority'  : Priority(),
        'task_type' : TaskType(),
        'loop'      : Loop(),
    }


# ------------------------------------------------------------------------------
#
class SubmissionRequest(TypedDict):

    _schema = {
        'requester'  : str,
        'description': TaskDescription,
    }

    _defaults = {
        'requester'  : '',
        'description': TaskDescription(),
    }


# ------------------------------------------------------------------------------
#
class SubmissionResponse(TypedDict):

    _schema = {
        'success': bool,
        'task_id': str,
        'message': str,
    }

    _defaults = {
        'success': False,
        'task_id': '',
        'message': '',
    }


# ------------------------------------------------------------------------------
#
def make_loop_request(start, finish, num_loops, now=None,
                      requester=REQUESTER):
    '''
    Assemble the submission request for a loop task.  Priority and task type
    are fixed, the dispatcher assigns task ID and robot type.  `now` defaults
    to the current wall clock time.
    '''

    if now is None:
        now = Time.now()

    loop = Loop(start_name=start, finish_name=finish, num_loops=num_loops)
    desc = TaskDescription(start_time=now,
                           priority=Priority(value=DEFAULT_PRIORITY),
                           task_type=TaskType(type=TYPE_LOOP),
                           loop=loop)

    return SubmissionRequest(requester=requester, description=desc).verify()


# ------------------------------------------------------------------------------

