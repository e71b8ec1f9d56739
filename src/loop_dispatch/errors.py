
__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


# ------------------------------------------------------------------------------
#
class DispatchError(Exception):
    '''
    Base class for all failures of a task submission.  Each failure terminates
    the submitter with `exit_code`.
    '''

    exit_code = 1


# ------------------------------------------------------------------------------
#
class UsageError(DispatchError):
    '''invalid or incomplete command line'''


class ServiceUnavailable(DispatchError):
    '''the submission service did not appear before interrupt or timeout'''


class TransportFailure(DispatchError):
    '''the request / response exchange itself failed'''


# ------------------------------------------------------------------------------
#
class BusinessFailure(DispatchError):
    '''the dispatcher answered, but rejected the task'''

    def __init__(self, response):

        self.response = response
        super().__init__(response.message)


# ------------------------------------------------------------------------------
#
class HelpRequested(Exception):
    '''usage was requested - not a failure'''

    exit_code = 0


# ------------------------------------------------------------------------------

