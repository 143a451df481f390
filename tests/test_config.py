import os
import unittest
from unittest.mock import patch
from sysdeps import config
from sysdeps.errors import ManifestError

class TestConfig(unittest.TestCase):

    def test_env_var_name(self):
        self.assertEqual(config.env_var_name("testlib"), "SYSDEPS_TESTLIB")
        self.assertEqual(config.env_var_name("gtk+-3.0", "FLAGS"), "SYSDEPS_GTK__3_0_FLAGS")
        self.assertEqual(config.env_var_name("test_lib", "BUILD_INTERNAL"), "SYSDEPS_TEST_LIB_BUILD_INTERNAL")

    def test_manifest_path(self):
        self.assertEqual(config.manifest_path("."), os.path.join(".", "pyproject.toml"))
        self.assertEqual(config.manifest_path("some/other.toml"), "some/other.toml")

    def test_get_metadata_table(self):
        manifest = {"tool": {"system-deps": {"testlib": "1.2"}}}
        self.assertEqual(config.get_metadata_table(manifest), {"testlib": "1.2"})
        with self.assertRaises(ManifestError):
            config.get_metadata_table({"tool": {}})
        with self.assertRaises(ManifestError):
            config.get_metadata_table({"tool": {"system-deps": ["testlib"]}})

    @patch('sysdeps.config.logger')
    def test_get_jobs(self, mock_logger):
        self.assertIsNone(config.get_jobs({}))
        self.assertEqual(config.get_jobs({"SYSDEPS_JOBS": "4"}), 4)
        self.assertIsNone(config.get_jobs({"SYSDEPS_JOBS": "0"}))
        self.assertIsNone(config.get_jobs({"SYSDEPS_JOBS": "many"}))
        mock_logger.warning.assert_called_once()

    def test_get_pkg_config_command(self):
        self.assertEqual(config.get_pkg_config_command({}), "pkg-config")
        self.assertEqual(config.get_pkg_config_command({"PKG_CONFIG": "pkgconf"}), "pkgconf")

if __name__ == "__main__":
    unittest.main()
