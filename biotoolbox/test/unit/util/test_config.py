#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.util.config`"""
import os
import shutil
import tempfile
import unittest
import pytest

from biotoolbox.util.config import ToolboxConfig, CONFIG_ENVIRONMENT_VARIABLE, DEFAULT_CONFIG_FILENAME
from biotoolbox.util.services.exceptions import MalformedFileError


CONFIG_TEXT = """databases:
  yeast:
    path: /data/sgd.gff3
    reference_sequence_type: contig
  hg19: /data/hg19.2bit
defaults:
  window: 1000
applications:
  java: /usr/bin/java
"""


@pytest.mark.unit
class TestToolboxConfig(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.tmpdir,"config.yaml")
        with open(self.config_file,"w") as fout:
            fout.write(CONFIG_TEXT)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_defaults(self):
        config = ToolboxConfig()
        self.assertEqual(config.default_window,500)
        self.assertEqual(config.default_step,500)
        self.assertEqual(config.reference_sequence_type(),"chromosome")
        self.assertIsNone(config.database("yeast"))
        self.assertIsNone(config.application("java"))

    def test_from_file(self):
        config = ToolboxConfig.from_file(self.config_file)
        self.assertEqual(config.filename,self.config_file)
        self.assertEqual(config.default_window,1000)
        self.assertEqual(config.default_step,500)
        self.assertEqual(config.database("yeast")["path"],"/data/sgd.gff3")
        self.assertEqual(config.database("hg19"),{"path" : "/data/hg19.2bit"})
        self.assertEqual(config.reference_sequence_type("yeast"),"contig")
        self.assertEqual(config.reference_sequence_type("hg19"),"chromosome")
        self.assertEqual(config.application("java"),"/usr/bin/java")

    def test_param(self):
        config = ToolboxConfig.from_file(self.config_file)
        self.assertEqual(config.param("applications.java"),"/usr/bin/java")
        self.assertEqual(config.param("defaults.window"),1000)
        self.assertIsNone(config.param("applications.wigToBigWig"))
        self.assertEqual(config.param("no.such.key","fallback"),"fallback")

    def test_malformed(self):
        bad = os.path.join(self.tmpdir,"bad.yaml")
        with open(bad,"w") as fout:
            fout.write("databases: [unclosed\n")
        self.assertRaises(MalformedFileError,ToolboxConfig.from_file,bad)

        with open(bad,"w") as fout:
            fout.write("- a\n- b\n")
        self.assertRaises(MalformedFileError,ToolboxConfig.from_file,bad)

    def test_empty_file(self):
        empty = os.path.join(self.tmpdir,"empty.yaml")
        open(empty,"w").close()
        self.assertEqual(ToolboxConfig.from_file(empty).default_window,500)

    def test_find_order(self):
        self.assertEqual(ToolboxConfig.find(self.config_file).filename,self.config_file)

        environ = { CONFIG_ENVIRONMENT_VARIABLE : self.config_file,"HOME" : "/nonexistent" }
        self.assertEqual(ToolboxConfig.find(environ=environ).filename,self.config_file)

        home_config = os.path.join(self.tmpdir,DEFAULT_CONFIG_FILENAME)
        shutil.copy(self.config_file,home_config)
        self.assertEqual(ToolboxConfig.find(environ={ "HOME" : self.tmpdir }).filename,home_config)

        self.assertIsNone(ToolboxConfig.find(environ={ "HOME" : "/nonexistent" }).filename)
