#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.util.io.openers` and :py:mod:`biotoolbox.util.io.filters`"""
import os
import io
import shutil
import pickle
import tempfile
import unittest
import pytest

from biotoolbox.util.io.openers import opener, get_short_name, read_bt_table, NullWriter
from biotoolbox.util.io.filters import NameDateWriter, ColorWriter


@pytest.mark.unit
class TestGetShortName(unittest.TestCase):

    def test_get_short_name(self):
        tests = [("test","test",{}),
                 ("test.py","test",dict(terminator=".py")),
                 ("/home/jdoe/test.py","test",dict(terminator=".py")),
                 ("/home/jdoe/test.py.py","test.py",dict(terminator=".py")),
                 ("/home/jdoe/test.py.2","test.py.2",{}),
                 ("/home/jdoe/test.py.2","test.py.2",dict(terminator=".py")),
                 ("biotoolbox.bin.test","test",dict(separator=r"\.",terminator=""))
                 ]
        for inp, expected, kwargs in tests:
            found = get_short_name(inp,**kwargs)
            self.assertEqual(expected,found,"get_short_name(): failed on input '%s'. Expected '%s'. Got '%s'" % (inp,expected,found))


@pytest.mark.unit
class TestOpeners(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_compressed_text_round_trip(self):
        for name in ("plain.txt","zipped.txt.gz","bzipped.txt.bz2"):
            fn = os.path.join(self.tmpdir,name)
            with opener(fn,"w") as fout:
                fout.write("line one\nline two\n")
            with opener(fn) as fh:
                self.assertEqual(fh.read(),"line one\nline two\n")

        with open(os.path.join(self.tmpdir,"zipped.txt.gz"),"rb") as fh:
            self.assertEqual(fh.read(2),b"\x1f\x8b")

    def test_read_bt_table(self):
        fn = os.path.join(self.tmpdir,"table.txt")
        with open(fn,"w") as fout:
            fout.write("# Program test\nName\tScore\na\t1.5\nb\t.\n")
        df = read_bt_table(fn)
        self.assertEqual(list(df.columns),["Name","Score"])
        self.assertEqual(df["Score"].iloc[0],1.5)
        self.assertTrue(df["Score"].isnull().iloc[1])


@pytest.mark.unit
class TestWriters(unittest.TestCase):

    def test_null_writer_pickles(self):
        writer = pickle.loads(pickle.dumps(NullWriter()))
        writer.write("discarded")
        self.assertEqual(repr(writer),"NullWriter()")

    def test_name_date_writer(self):
        stream = io.StringIO()
        writer = NameDateWriter("useq2bigfile",stream=stream)
        writer.write("Converting file\n")
        found = stream.getvalue()
        self.assertTrue(found.startswith("useq2bigfile ["))
        self.assertTrue(found.endswith("]: Converting file\n"))

    def test_color_writer_without_tty(self):
        writer = ColorWriter(stream=io.StringIO())
        self.assertEqual(writer.color("text",color="red"),"text")
