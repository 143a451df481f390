import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch
from click.testing import CliRunner
from sysdeps import cli_logger
from sysdeps.library import Library
from sysdeps.main import cli
from sysdeps.utils.pkg_config import DiscoveryTool

MANIFEST = '''
[project]
name = "demo"

[tool.system-deps]
testlib = "1.2"
testdata = { version = "4.5", feature = "use-testdata" }
'''


class FakeTool(DiscoveryTool):
    def __init__(self, libraries):
        self.libraries = libraries
        self.queries = []

    def query(self, name):
        self.queries.append(name)
        return self.libraries.get(name)


class CliTestCase(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.test_dir = tempfile.mkdtemp()
        with open(os.path.join(self.test_dir, "pyproject.toml"), "w") as f:
            f.write(MANIFEST)
        self.tool = FakeTool({
            "testlib": Library(name="testlib", version="1.3", libs=["testlib"], lib_paths=["/usr/lib"]),
            "testdata": Library(name="testdata", version="4.0", libs=["testdata"]),
        })
        for target in ('sysdeps.probe.logger', 'sysdeps.config.logger'):
            patcher = patch(target)
            patcher.start()
            self.addCleanup(patcher.stop)
        patcher = patch('sysdeps.probe.PkgConfig', return_value=self.tool)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def invoke(self, *args, env=None):
        return self.runner.invoke(cli, ["--path", self.test_dir, *args], env=env)


class TestProbeCommand(CliTestCase):

    def test_probe_prints_directives(self):
        result = self.invoke("probe")
        self.assertEqual(result.exit_code, 0, result.output)
        lines = result.output.splitlines()
        self.assertEqual(lines, [
            "sysdeps:link-search=/usr/lib",
            "sysdeps:link-lib=testlib",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_FLAGS",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_SEARCH_NATIVE",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_LIB",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_INCLUDE",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_NO_PKG_CONFIG",
            "sysdeps:rerun-if-env-changed=SYSDEPS_TESTLIB_BUILD_INTERNAL",
            "sysdeps:rerun-if-env-changed=SYSDEPS_BUILD_INTERNAL",
            "sysdeps:rerun-if-env-changed=PKG_CONFIG",
        ])
        self.assertEqual(self.tool.queries, ["testlib"])

    def test_probe_prefix_and_json(self):
        result = self.invoke("probe", "--prefix", "cargo")
        self.assertIn("cargo:link-lib=testlib", result.output.splitlines())

        result = self.invoke("probe", "--format", "json")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn({"kind": "link-lib", "payload": "testlib"}, json.loads(result.output))

    @patch('sysdeps.decorators.logger')
    def test_probe_failure_exits_nonzero(self, mock_logger):
        result = self.invoke("probe", "--feature", "use-testdata")
        self.assertEqual(result.exit_code, 1)
        self.assertNotIn("sysdeps:link-lib", result.output)
        mock_logger.error.assert_any_call("1 system dependency could not be resolved:")
        mock_logger.error.assert_any_call("  - testdata: version 4.5 or newer is required, but 4.0 was found")

    def test_probe_feature_from_environment(self):
        result = self.invoke("probe", env={"SYSDEPS_FEATURE_USE_TESTDATA": "1"})
        self.assertEqual(result.exit_code, 1)

    def test_probe_override(self):
        result = self.invoke("probe", env={"SYSDEPS_TESTLIB_FLAGS": "-lcustom"})
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("sysdeps:link-lib=custom", result.output.splitlines())
        self.assertEqual(self.tool.queries, [])

    @patch('sysdeps.decorators.logger')
    def test_probe_missing_manifest(self, mock_logger):
        os.remove(os.path.join(self.test_dir, "pyproject.toml"))
        result = self.invoke("probe")
        self.assertEqual(result.exit_code, 1)
        self.assertTrue(mock_logger.error.call_args[0][0].startswith("Error: error opening"))

    @patch('sysdeps.decorators.logger')
    def test_probe_invalid_spec(self, mock_logger):
        with open(os.path.join(self.test_dir, "pyproject.toml"), "w") as f:
            f.write('[tool.system-deps]\ntestlib = { version = "1", color = "blue" }\n')
        result = self.invoke("probe")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("unexpected key 'color'", mock_logger.error.call_args[0][0])


class TestCheckCommand(CliTestCase):

    @patch('sysdeps.commands.check.logger')
    def test_check_ok(self, mock_logger):
        result = self.invoke("check")
        self.assertEqual(result.exit_code, 0)
        mock_logger.step_info.assert_any_call("testlib: found 1.3 (pkg-config)", indent=2)
        mock_logger.step_info.assert_any_call("testdata: skipped (disabled) feature 'use-testdata' is not enabled", indent=2)
        mock_logger.success.assert_called_once_with("All system dependencies are satisfied.")

    @patch('sysdeps.commands.check.logger')
    def test_check_failure(self, mock_logger):
        result = self.invoke("check", "-f", "use-testdata")
        self.assertEqual(result.exit_code, 1)
        mock_logger.error.assert_any_call("1 of 2 system dependencies are not satisfied.")


class TestShowCommand(CliTestCase):

    def test_show(self):
        result = self.invoke("show")
        self.assertEqual(result.exit_code, 0)
        self.assertIn("testlib: testlib >= 1.2", result.output)
        self.assertIn("testdata: disabled (feature 'use-testdata' not enabled)", result.output)
        self.assertEqual(self.tool.queries, [])

    def test_show_with_feature(self):
        result = self.invoke("show", "-f", "use-testdata")
        self.assertIn("testdata: testdata >= 4.5", result.output)


class TestVersionCommand(unittest.TestCase):

    @patch('importlib.metadata.version', return_value="0.1.0")
    def test_version(self, mock_version):
        result = CliRunner().invoke(cli, ["version"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), "sysdeps 0.1.0")
        mock_version.assert_called_once_with("sysdeps")


class TestLogCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.log_dir = tempfile.mkdtemp()
        patcher = patch.object(cli_logger, "LOG_DIR", self.log_dir)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        shutil.rmtree(self.log_dir)

    def test_no_logs(self):
        result = self.runner.invoke(cli, ["log", "--list"])
        self.assertIn("No log files found.", result.output)

    def test_show_latest(self):
        with open(os.path.join(self.log_dir, "sysdeps_20260101_000000.log"), "w") as f:
            f.write("[12:00:00] [ERROR] testlib: not found\n")
        result = self.runner.invoke(cli, ["log"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("testlib: not found", result.output)

        result = self.runner.invoke(cli, ["log", "--list"])
        self.assertIn("sysdeps_20260101_000000.log", result.output)

if __name__ == "__main__":
    unittest.main()
