import os
import tempfile
import unittest
from unittest import mock

from config import Config
from sectiontable import MAX_NUMBER_OF_SECTIONS


class ConfigTest(unittest.TestCase):
    def test_defaults(self):
        config = Config()
        config.load("/nonexistant/config.yaml")
        self.assertEqual(config.get("max_sections"), MAX_NUMBER_OF_SECTIONS)
        self.assertIsNone(config.get("spec_file"))


    def test_load(self):
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w") as f:
            f.write("max_sections: 96\nlog_level: DEBUG\n")
        self.addCleanup(os.remove, path)

        config = Config()
        config.load(path)
        self.assertEqual(config.getConfigPath(), path)
        self.assertEqual(config.get("max_sections"), 96)
        self.assertEqual(config.get("log_level"), "DEBUG")
        self.assertIsNone(config.get("flags_file"))

        with mock.patch.dict(os.environ, {"PESECT_MAX_SECTIONS": "16"}):
            config.load(path)
        self.assertEqual(config.get("max_sections"), 16)
