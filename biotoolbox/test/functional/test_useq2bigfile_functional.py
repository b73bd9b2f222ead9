#!/usr/bin/env python
"""Functional tests for :py:mod:`biotoolbox.bin.useq2bigfile`

External programs (``java``/`USeq2Text` and the `UCSC`_ utilities) are
replaced by a stand-in for :func:`subprocess.check_call`. The stand-in for
`USeq2Text` writes a `BED`_ file beside the archive, and the stand-in for a
`UCSC`_ utility copies the intermediate file to the output, so the
intermediate files can be checked after the script has cleaned up.
"""
import os
import shutil
import tempfile
import unittest
import warnings
import subprocess
from unittest import mock
import pytest

from biotoolbox.bin.useq2bigfile import main
from biotoolbox.util.services import exceptions


BED_TEXT = """chrI\t0\t10\t.\t1.5\t+
chrI\t0\t10\t.\t2.5\t+
chrI\t20\t30\t.\t3\t-
chrI\t600\t700\t.\t5\t+
chrII\t0\t1\t.\t1200\t.
"""

CONFIG_TEXT = """applications:
  java: java
  USeq2Text: /opt/USeq/Apps/USeq2Text
  wigToBigWig: /opt/kent/wigToBigWig
  bedGraphToBigWig: /opt/kent/bedGraphToBigWig
  bedToBigBed: /opt/kent/bedToBigBed
"""

SIZES_TEXT = "chrII\t1000\nchrI\t500\n"

GFF_TEXT = """##gff-version 3
##sequence-region chrII 1 1000
##sequence-region chrI 1 500
"""


@pytest.mark.functional
class TestUSeq2BigFile(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.useq = self.write("sample.useq","binary archive")
        self.config = self.write("config.yaml",CONFIG_TEXT)
        self.sizes = self.write("chrom.sizes",SIZES_TEXT)
        self.calls = []
        self.chrom_text = None
        self.bed_text = BED_TEXT

        self.old_filters  = list(exceptions.bt_filters)
        self.old_registry = dict(exceptions.bt_once_registry)
        self.catcher = warnings.catch_warnings()
        self.catcher.__enter__()
        warnings.simplefilter("ignore")

    def tearDown(self):
        self.catcher.__exit__(None,None,None)
        exceptions.bt_filters[:] = self.old_filters
        exceptions.bt_once_registry.clear()
        exceptions.bt_once_registry.update(self.old_registry)
        shutil.rmtree(self.tmpdir)

    def write(self,name,text):
        fn = os.path.join(self.tmpdir,name)
        with open(fn,"w") as fout:
            fout.write(text)
        return fn

    def read(self,name):
        with open(os.path.join(self.tmpdir,name)) as fh:
            return fh.read()

    def fake_check_call(self,cmd):
        self.calls.append(list(cmd))
        if cmd[0] == "java":
            if self.bed_text is not None:
                with open(cmd[5][:-5] + ".bed","w") as fout:
                    fout.write(self.bed_text)
        else:
            with open(cmd[2]) as fh:
                self.chrom_text = fh.read()
            shutil.copy(cmd[1],cmd[3])

    def run_main(self,argv):
        with mock.patch("biotoolbox.bin.useq2bigfile.subprocess.check_call",side_effect=self.fake_check_call):
            return main(argv + ["--config",self.config])

    def test_wiggle(self):
        self.assertEqual(self.run_main(["--in",self.useq,"--bw","--chromof",self.sizes]),0)
        self.assertEqual(self.calls[0],["java","-Xmx1500M","-jar","/opt/USeq/Apps/USeq2Text","-f",self.useq])
        self.assertEqual(self.calls[1][0],"/opt/kent/wigToBigWig")
        self.assertEqual(self.calls[1][2:],[self.sizes,os.path.join(self.tmpdir,"sample.bw")])
        self.assertEqual(self.read("sample.bw"),"variableStep chrom=chrI\n"
                                                "5 2\n"
                                                "25 3\n"
                                                "variableStep chrom=chrII\n"
                                                "1 1200\n")
        self.assertEqual(sorted(os.listdir(self.tmpdir)),["chrom.sizes","config.yaml","sample.bw","sample.useq"])

    def test_bedgraph_by_flag(self):
        self.run_main([self.useq,"--bw","--gr","--method","max","--strand","f","--chromof",self.sizes])
        self.assertEqual(self.calls[1][0],"/opt/kent/bedGraphToBigWig")
        self.assertEqual(self.read("sample.bw"),"chrI\t0\t10\t2.5\n"
                                                "chrII\t0\t1\t1200\n")

    def test_bedgraph_by_application_name(self):
        out = os.path.join(self.tmpdir,"renamed.bw")
        self.run_main(["--in",self.useq,"--bw","--bigapp","/usr/local/bin/bedGraphToBigWig",
                       "--chromof",self.sizes,"--out",out])
        self.assertEqual(self.calls[1][0],"/usr/local/bin/bedGraphToBigWig")
        self.assertEqual(self.calls[1][3],out)
        self.assertTrue(self.read("renamed.bw").startswith("chrI\t0\t10\t2\n"))
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir,"renamed.bedgraph")))

    def test_bigbed(self):
        self.run_main(["--in",self.useq,"--bb","--chromof",self.sizes])
        self.assertEqual(self.calls[1][0],"/opt/kent/bedToBigBed")
        self.assertEqual(self.read("sample.bb"),"chrI\t0\t10\t.\t1\t+\n"
                                                "chrI\t0\t10\t.\t2\t+\n"
                                                "chrI\t20\t30\t.\t3\t-\n"
                                                "chrII\t0\t1\t.\t1000\t+\n")
        self.assertFalse(os.path.exists(self.calls[1][1]))

    def test_sizes_from_database(self):
        gff = self.write("genes.gff3",GFF_TEXT)
        self.run_main(["--in",self.useq,"--bw","--db",gff])
        self.assertEqual(self.chrom_text,"chrI\t500\nchrII\t1000\n")
        self.assertNotEqual(self.calls[1][2],gff)
        self.assertFalse(os.path.exists(self.calls[1][2]))

    def test_invalid_arguments_exit(self):
        tests = [ ["--in",self.useq,"--chromof",self.sizes],
                  ["--in",self.useq,"--bw","--bb","--chromof",self.sizes],
                  ["--in",self.sizes,"--bw","--chromof",self.sizes],
                  ["--bw","--chromof",self.sizes],
                  ["--in",self.useq,"--bw"],
                  ["--in",self.useq,"--bw","--gr","--bigapp","/opt/wigToBigWig","--chromof",self.sizes],
                  ["--in",self.useq,"--bw","--bigapp","/opt/bedToBigBed","--chromof",self.sizes],
                  ["--in",self.useq,"--bb","--bigapp","/opt/wigToBigWig","--chromof",self.sizes],
                ]
        for argv in tests:
            self.assertRaises(SystemExit,self.run_main,argv)
        self.assertEqual(self.calls,[])

    def test_missing_useq2text_output(self):
        self.bed_text = None
        self.assertRaises(SystemExit,self.run_main,["--in",self.useq,"--bw","--chromof",self.sizes])
        self.assertEqual(len(self.calls),1)

    def test_unknown_chromosome_cleans_up(self):
        sizes = self.write("small.sizes","chrI\t500\n")
        self.assertRaises(SystemExit,self.run_main,["--in",self.useq,"--bw","--chromof",sizes])
        self.assertEqual(len(self.calls),1)
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir,"sample.bed")))
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir,"sample.wig")))

    def test_failed_conversion_exits(self):
        def fail(cmd):
            self.fake_check_call(cmd)
            if cmd[0] != "java":
                raise subprocess.CalledProcessError(255,cmd)

        with mock.patch("biotoolbox.bin.useq2bigfile.subprocess.check_call",side_effect=fail):
            self.assertRaises(SystemExit,main,["--in",self.useq,"--bw","--chromof",self.sizes,"--config",self.config])
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir,"sample.wig")))
        self.assertFalse(os.path.exists(os.path.join(self.tmpdir,"sample.bed")))
