#!/usr/bin/env python3

__author__    = 'loop_dispatch Development Team'
__email__     = 'loop-dispatch@example.org'
__copyright__ = 'Copyright 2026, loop_dispatch Development Team'
__license__   = 'MIT'


''' Setup script, only usable via pip. '''

import os

from glob       import glob
from setuptools import setup, find_packages


# ------------------------------------------------------------------------------
name     = 'loop_dispatch'
mod_root = 'src/%s/' % name

scripts  = list(glob('bin/*'))
root     = os.path.dirname(__file__) or '.'
descr    = 'Submit loop tasks to a robot task dispatcher'

data     = [('share/%s/examples/' % name, glob('examples/*.py'))]


# ------------------------------------------------------------------------------
#
def get_version(_mod_root):
    '''
    the VERSION file in mod_root contains the version string, and is also used
    at runtime to get the version information.
    '''

    try:
        with open('%s/%s/VERSION' % (root, _mod_root), 'r',
                  encoding='utf-8') as fin:
            return fin.readline().strip()

    except Exception as e:
        raise RuntimeError('Could not extract version: %s' % e) from e


# ------------------------------------------------------------------------------
#
version = get_version(mod_root)

with open('%s/requirements.txt' % root, encoding='utf-8') as freq:
    requirements = [line.strip() for line in freq.readlines() if line.strip()]

with open('%s/requirements-tests.txt' % root, encoding='utf-8') as freq:
    requirements_tests = [line.strip() for line in freq.readlines()
                                       if line.strip()]


# ------------------------------------------------------------------------------
#
setup_args = {
    'name'               : name,
    'version'            : version,
    'description'        : descr,
    'author'             : 'loop_dispatch Development Team',
    'author_email'       : __email__,
    'license'            : 'MIT',
    'keywords'           : 'robotics task dispatch zmq',
    'python_requires'    : '>=3.7',
    'classifiers'        : [
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Environment :: Console',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Utilities',
        'Topic :: System :: Distributed Computing',
        'Operating System :: POSIX',
        'Operating System :: Unix'
    ],
    'packages'           : find_packages('src'),
    'package_dir'        : {'': 'src'},
    'scripts'            : scripts,
    'package_data'       : {'': ['*.json', 'VERSION', 'configs/*.json']},
    'install_requires'   : requirements,
    'extras_require'     : {'tests': requirements_tests},
    'zip_safe'           : False,
    'data_files'         : data,
}


# ------------------------------------------------------------------------------
#
setup(**setup_args)


# ------------------------------------------------------------------------------

