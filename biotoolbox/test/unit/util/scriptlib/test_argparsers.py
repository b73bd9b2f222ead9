#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.util.scriptlib.argparsers`"""
import os
import shutil
import argparse
import tempfile
import unittest
import warnings
import pytest

from biotoolbox.genomics.sources import ChromSizesFile, GFF3Annotation
from biotoolbox.util.config import ToolboxConfig
from biotoolbox.util.scriptlib.argparsers import BaseParser, ChromosomeSizeParser,\
                                                 PrefixNamespaceWrapper
from biotoolbox.util.services import exceptions
from biotoolbox.util.services.exceptions import FileFormatWarning, warn


class WarningStateMixin(object):
    """Restore module-level `onceperfamily` state after each test"""

    def save_warning_state(self):
        self.old_filters  = list(exceptions.bt_filters)
        self.old_registry = dict(exceptions.bt_once_registry)
        exceptions.bt_filters[:] = []
        exceptions.bt_once_registry.clear()

    def restore_warning_state(self):
        exceptions.bt_filters[:] = self.old_filters
        exceptions.bt_once_registry.clear()
        exceptions.bt_once_registry.update(self.old_registry)


@pytest.mark.unit
class TestPrefixNamespaceWrapper(unittest.TestCase):

    def test_getattr(self):
        ns = argparse.Namespace(ref_chromof="a",chromof="b")
        self.assertEqual(PrefixNamespaceWrapper(ns,"ref_").chromof,"a")
        self.assertEqual(PrefixNamespaceWrapper(ns,"").chromof,"b")


@pytest.mark.unit
class TestBaseParser(unittest.TestCase,WarningStateMixin):

    def setUp(self):
        self.save_warning_state()
        self.tmpdir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.tmpdir,"config.yaml")
        with open(self.config_file,"w") as fout:
            fout.write("defaults:\n  window: 50\n")

    def tearDown(self):
        self.restore_warning_state()
        shutil.rmtree(self.tmpdir)

    def parse(self,argv):
        bp = BaseParser()
        parser = argparse.ArgumentParser(parents=[bp.get_parser()])
        args = parser.parse_args(argv + ["--config",self.config_file])
        return bp.get_base_ops_from_args(args)

    def test_config(self):
        config = self.parse([])
        self.assertIsInstance(config,ToolboxConfig)
        self.assertEqual(config.default_window,50)

    def test_default_warns_once_per_family(self):
        with warnings.catch_warnings(record=True) as warns:
            warnings.simplefilter("always")
            self.parse([])
            warn("Padding row at line 1",FileFormatWarning)
            warn("Padding row at line 2",FileFormatWarning)
        self.assertEqual(len(warns),1)

    def test_verbose_shows_all(self):
        with warnings.catch_warnings(record=True) as warns:
            warnings.simplefilter("always")
            self.parse(["-v"])
            warn("Padding row at line 1",FileFormatWarning)
            warn("Padding row at line 2",FileFormatWarning)
        self.assertEqual(len(warns),2)

    def test_quiet(self):
        with warnings.catch_warnings(record=True) as warns:
            warnings.simplefilter("always")
            self.parse(["-q"])
            warn("Padding row at line 1",FileFormatWarning)
        self.assertEqual(len(warns),0)

    def test_very_verbose_raises(self):
        for argv in (["-vv"],["-vvv"]):
            with warnings.catch_warnings():
                warnings.simplefilter("always")
                self.parse(argv)
                self.assertRaises(FileFormatWarning,warn,"Padding row at line 1",FileFormatWarning)


@pytest.mark.unit
class TestChromosomeSizeParser(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.sizes_file = os.path.join(self.tmpdir,"chrom.sizes")
        with open(self.sizes_file,"w") as fout:
            fout.write("chr1\t100\n")
        self.gff_file = os.path.join(self.tmpdir,"genes.gff3")
        with open(self.gff_file,"w") as fout:
            fout.write("##sequence-region chrI 1 500\n")

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def parse(self,argv,prefix=""):
        cp = ChromosomeSizeParser(prefix=prefix)
        parser = argparse.ArgumentParser(parents=[cp.get_parser()])
        return cp.get_chromosome_source_from_args(parser.parse_args(argv))

    def test_chromosome_file(self):
        source = self.parse(["--chromof",self.sizes_file])
        self.assertIsInstance(source,ChromSizesFile)
        self.assertEqual(dict(source.chromosome_sizes()),{"chr1" : 100})

    def test_chromosome_file_takes_precedence(self):
        source = self.parse(["--chromof",self.sizes_file,"--db",self.gff_file])
        self.assertIsInstance(source,ChromSizesFile)

    def test_database(self):
        source = self.parse(["--db",self.gff_file])
        self.assertIsInstance(source,GFF3Annotation)
        self.assertEqual(dict(source.chromosome_sizes()),{"chrI" : 500})

    def test_database_alias(self):
        cp = ChromosomeSizeParser()
        parser = argparse.ArgumentParser(parents=[cp.get_parser()])
        config = ToolboxConfig({ "databases" : { "yeast" : self.gff_file }})
        source = cp.get_chromosome_source_from_args(parser.parse_args(["--db","yeast"]),config=config)
        self.assertEqual(source.filename,self.gff_file)

    def test_prefix(self):
        source = self.parse(["--ref_chromof",self.sizes_file],prefix="ref_")
        self.assertIsInstance(source,ChromSizesFile)

    def test_nothing_given(self):
        self.assertRaises(ValueError,self.parse,[])

    def test_disabled(self):
        cp = ChromosomeSizeParser(disabled=["db"])
        parser = argparse.ArgumentParser(parents=[cp.get_parser()])
        self.assertFalse(hasattr(parser.parse_args([]),"db"))
