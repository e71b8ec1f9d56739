#!/usr/bin/env python3

# ------------------------------------------------------------------------------
#
# A stand-in for the task dispatcher: hosts a registry and a `submit_task`
# service which accepts loop tasks and answers with a fresh task ID.  Use it to
# try `loop-dispatch` locally:
#
#   ./dispatcher_stub.py tcp://*:10001 &
#   loop-dispatch -s pantry -f lounge -n 3 -r tcp://localhost:10001
#

import sys
import itertools

import loop_dispatch as ld

from loop_dispatch.messages import SUBMIT_TASK


_task_ids = itertools.count()


# ------------------------------------------------------------------------------
#
def submit_task(request):

    loop = request.description.loop

    if request.description.task_type.type != ld.TYPE_LOOP:
        return ld.SubmissionResponse(success=False,
                                     message='unsupported task type')

    if not loop.start_name or not loop.finish_name:
        return ld.SubmissionResponse(success=False,
                                     message='start and finish are required')

    task_id = 'Loop%d' % next(_task_ids)
    print('%s: %s -> %s (%d loops) from %s'
          % (task_id, loop.start_name, loop.finish_name, loop.num_loops,
             request.requester))

    return ld.SubmissionResponse(success=True, task_id=task_id)


# ------------------------------------------------------------------------------
#
if __name__ == '__main__':

    url = sys.argv[1] if len(sys.argv) > 1 else 'tcp://*:10001'

    registry = ld.zmq.Registry(url=url)
    registry.start()

    cfg = ld.Config(cfg={'registry_url': registry.addr})

    try:
        with ld.Context(cfg) as ctx:
            ctx.create_service(SUBMIT_TASK, submit_task)
            while ctx.sleep(1.0):
                pass

    finally:
        registry.stop()
        registry.wait()


# ------------------------------------------------------------------------------
