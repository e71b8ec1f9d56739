#!/usr/bin/env python3

# pylint: disable=protected-access

import os
import json

from unittest import TestCase

import loop_dispatch as ld

from loop_dispatch.typeddict import SchemaKeyError


def write_cfg(data, fname, comment=None):

    with open(fname, 'w') as fout:
        if comment:
            fout.write('# %s\n' % comment)
        json.dump(data, fout)


# ------------------------------------------------------------------------------
#
class ConfigTestCase(TestCase):

    # --------------------------------------------------------------------------
    #
    def setUp(self):

        # no user configs, no env settings
        self._env = {'LOOP_DISPATCH_CONFIG_USER_DIR': '/tmp/does_not_exist',
                     'HOME'                         : '/tmp/does_not_exist'}

    # --------------------------------------------------------------------------
    #
    def test_default(self):

        cfg = ld.Config(env=self._env)

        self.assertEqual(cfg.registry_url,  'tcp://localhost:10001')
        self.assertEqual(cfg.service,       'submit_task')
        self.assertEqual(cfg.poll_interval, 1.0)
        self.assertIsNone(cfg.wait_timeout)
        self.assertIsNone(cfg.call_timeout)
        self.assertEqual(cfg.log_lvl,       'INFO')
        self.assertEqual(cfg.log_tgt,       'stdout')

    # --------------------------------------------------------------------------
    #
    def test_env(self):

        self._env['LOOP_DISPATCH_REGISTRY_URL'] = 'tcp://dispatcher:1234'
        self._env['LOOP_DISPATCH_WAIT_TIMEOUT'] = '30'

        cfg = ld.Config(env=self._env)

        self.assertEqual(cfg.registry_url, 'tcp://dispatcher:1234')
        self.assertEqual(cfg.wait_timeout, 30.0)
        self.assertIsInstance(cfg.wait_timeout, float)

    # --------------------------------------------------------------------------
    #
    def test_layers(self):

        usr_dir = '/tmp/loop_dispatch_test_cfg.%d' % os.getpid()
        os.makedirs(usr_dir, exist_ok=True)

        usr_cfg = '%s/submitter.json' % usr_dir
        app_cfg = '%s/app.json'       % usr_dir

        try:
            write_cfg({'service': 'usr_service',
                       'poll_interval': 2}, usr_cfg, comment='user settings')
            write_cfg({'service': 'app_service'}, app_cfg)

            self._env['LOOP_DISPATCH_CONFIG_USER_DIR'] = usr_dir

            cfg = ld.Config(env=self._env)
            self.assertEqual(cfg.service,       'usr_service')
            self.assertEqual(cfg.poll_interval, 2.0)

            cfg = ld.Config(path=app_cfg, env=self._env)
            self.assertEqual(cfg.service,       'app_service')
            self.assertEqual(cfg.poll_interval, 2.0)

            cfg = ld.Config(path=app_cfg, cfg={'service': 'cli'},
                            env=self._env)
            self.assertEqual(cfg.service, 'cli')

        finally:
            for fname in [usr_cfg, app_cfg]:
                if os.path.exists(fname):
                    os.unlink(fname)
            os.rmdir(usr_dir)

    # --------------------------------------------------------------------------
    #
    def test_invalid(self):

        with self.assertRaises(ValueError):
            ld.Config(cfg={'poll_interval': 0}, env=self._env)

        with self.assertRaises(ValueError):
            ld.Config(cfg={'registry_url': ''}, env=self._env)

        with self.assertRaises(SchemaKeyError):
            ld.Config(cfg={'no_such_key': 1}, env=self._env)

    # --------------------------------------------------------------------------
    #
    def test_invalid_file(self):

        fname = '/tmp/loop_dispatch_test_cfg.%d.json' % os.getpid()

        try:
            with open(fname, 'w') as fout:
                fout.write('# not json\n{"service": ')

            with self.assertRaises(ValueError) as e:
                ld.Config(path=fname, env=self._env)
            self.assertIn(fname, str(e.exception))

        finally:
            os.unlink(fname)


# ------------------------------------------------------------------------------
#
if __name__ == '__main__':

    tc = ConfigTestCase()
    tc.setUp()
    tc.test_default()


# ------------------------------------------------------------------------------

