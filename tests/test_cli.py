import unittest
import unittest.mock

import contextlib
import io
import os

from jetpack import __version__
from jetpack import cli
from jetpack import configs

from tests import fixtures


class CliTest(fixtures.RepoTestCaseBase):

    def setUp(self):
        super().setUp()
        unittest.mock.patch.object(
            configs, 'DEFAULT_PATH', self.test_repo_path / 'no-such-file'
        ).start()
        unittest.mock.patch.dict(os.environ, {'DEBUG': ''}).start()
        self.image_hash = fixtures.make_hash('01')
        self.write_image(
            self.image_hash,
            self.make_image_manifest('example.com/web', os='linux'),
        )
        self.pod_uuid = fixtures.POD_UUID_1
        self.write_pod(
            self.pod_uuid,
            self.make_pod_manifest(
                ('web', 'example.com/web', self.image_hash),
            ),
        )

    def tearDown(self):
        unittest.mock.patch.stopall()
        super().tearDown()

    def run_main(self, *args):
        stdout = io.StringIO()
        stderr = io.StringIO()
        argv = ['jetpack', '-o', 'root=%s' % self.test_repo_path]
        argv.extend(args)
        with contextlib.redirect_stdout(stdout), \
                contextlib.redirect_stderr(stderr):
            exit_status = cli.main(argv)
        return exit_status, stdout.getvalue(), stderr.getvalue()

    def test_version(self):
        self.assertEqual(
            self.run_main('version'),
            (cli.EXIT_OK, 'jetpack %s\n' % __version__, ''),
        )

    def test_info(self):
        exit_status, stdout, _ = self.run_main('info')
        self.assertEqual(exit_status, cli.EXIT_OK)
        self.assertIn('root: %s\n' % self.test_repo_path, stdout)
        self.assertIn('images: 1\n', stdout)
        self.assertIn('pods: 1\n', stdout)

    def test_no_command(self):
        exit_status, stdout, stderr = self.run_main()
        self.assertEqual(exit_status, cli.EXIT_USAGE)
        self.assertEqual(stdout, '')
        self.assertIn('Commands:\n', stderr)

    def test_unknown_command(self):
        self.assertEqual(
            self.run_main('no-such-command'),
            (
                cli.EXIT_USAGE,
                '',
                'jetpack: unknown command: no-such-command\n',
            ),
        )

    def test_usage_error(self):
        self.assertEqual(
            self.run_main('pod'),
            (cli.EXIT_USAGE, '', 'Usage: jetpack pod POD\n'),
        )
        self.assertEqual(
            self.run_main('pod', 'my-pod'),
            (cli.EXIT_USAGE, '', 'Usage: jetpack pod POD\n'),
        )

    def test_error(self):
        pod_uuid = '00000000-0000-0000-0000-000000000000'
        exit_status, stdout, stderr = self.run_main('pod', pod_uuid)
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertEqual(stdout, '')
        self.assertEqual(stderr, 'jetpack: pod not found: %s\n' % pod_uuid)

        exit_status, _, stderr = self.run_main('-v', 'pod', pod_uuid)
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertIn('jetpack: pod not found: %s\n' % pod_uuid, stderr)
        self.assertIn("  while resolving pod '%s'\n" % pod_uuid, stderr)

    def test_images(self):
        self.assertEqual(
            self.run_main('images', '-q'),
            (cli.EXIT_OK, '%s\n' % self.image_hash, ''),
        )
        exit_status, stdout, _ = self.run_main(
            '-o', 'output.format=csv', '-o', 'output.header=false', 'images'
        )
        self.assertEqual(exit_status, cli.EXIT_OK)
        self.assertEqual(
            stdout, '%s,example.com/web,os=linux\n' % self.image_hash
        )

    def test_hash(self):
        self.assertEqual(
            self.run_main('hash', 'sha512-01'),
            (cli.EXIT_OK, '%s\n' % self.image_hash, ''),
        )
        exit_status, _, stderr = self.run_main('hash', 'sha512-02')
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertEqual(stderr, 'jetpack: image not found: sha512-02\n')

    def test_app(self):
        self.assertEqual(
            self.run_main('app', str(self.pod_uuid)),
            (
                cli.EXIT_OK,
                'pod: %s\n'
                'name: web\n'
                'image: %s\n'
                'exec: /bin/web\n' % (self.pod_uuid, self.image_hash),
                '',
            ),
        )

    def test_malformed_manifest(self):
        manifest = self.make_pod_manifest(
            ('web', 'example.com/web', self.image_hash),
        )
        manifest['apps'][0]['app']['environment'] = [{'name': 'PORT'}]
        self.write_pod(fixtures.POD_UUID_2, manifest)
        exit_status, stdout, stderr = self.run_main(
            'env', str(fixtures.POD_UUID_2)
        )
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertEqual(stdout, '')
        self.assertEqual(
            stderr,
            "jetpack: malformed environment entry: {'name': 'PORT'}\n",
        )

    def test_config_errors(self):
        exit_status, _, stderr = self.run_main(
            '-c', str(self.test_repo_path / 'no-such-file'), 'version'
        )
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertIn('config file not found', stderr)

        exit_status, _, stderr = self.run_main(
            '-o', 'output.format=json', 'version'
        )
        self.assertEqual(exit_status, cli.EXIT_ERROR)
        self.assertIn('expect one of text, csv', stderr)

    def test_bad_flags(self):
        for args in (('-o', 'no-value', 'version'), ('images', '-x')):
            with self.subTest(args=args):
                with self.assertRaises(SystemExit) as cm:
                    self.run_main(*args)
                self.assertEqual(cm.exception.code, cli.EXIT_USAGE)

    def test_config_file(self):
        config_path = self.test_repo_path / 'jetpack.yaml'
        config_path.write_text('output:\n  format: csv\n')
        exit_status, stdout, _ = self.run_main(
            '-c', str(config_path), 'pods'
        )
        self.assertEqual(exit_status, cli.EXIT_OK)
        self.assertEqual(stdout, 'UUID,APPS\n%s,web\n' % self.pod_uuid)


if __name__ == '__main__':
    unittest.main()
