
# flake8: noqa: F401

__author__    = 'loop_dispatch Development Team'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


from .client   import Client
from .server   import Server
from .registry import Registry, RegistryClient


# ------------------------------------------------------------------------------

