#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.readers.gff_tokens`"""
import unittest
import warnings
import pytest

from biotoolbox.readers.gff_tokens import escape_GFF3, unescape_GFF3, parse_GFF3_tokens,\
                                          parse_GTF2_tokens, parse_attributes
from biotoolbox.util.services.exceptions import FileFormatWarning


@pytest.mark.unit
class TestEscaping(unittest.TestCase):

    def test_escape(self):
        self.assertEqual(escape_GFF3("a;b=c,d%e&f"),"a%3Bb%3Dc%2Cd%25e%26f")
        self.assertEqual(escape_GFF3("tab\there"),"tab%09here")
        self.assertEqual(escape_GFF3("plain text"),"plain text")
        self.assertEqual(escape_GFF3(500),"500")

    def test_unescape(self):
        self.assertEqual(unescape_GFF3("a%3Bb%3dc"),"a;b=c")
        self.assertEqual(unescape_GFF3("no codes"),"no codes")

    def test_escape_is_reversible(self):
        for inp in ("H3K4me3;rep1","x=1,2","100%"):
            self.assertEqual(unescape_GFF3(escape_GFF3(inp)),inp)


@pytest.mark.unit
class TestAttributeParsing(unittest.TestCase):

    def test_parse_GFF3_tokens(self):
        found = parse_GFF3_tokens("ID=gene01;Name=ABC1%3B2;Alias=a,b;")
        self.assertEqual(found,{"ID" : "gene01","Name" : "ABC1;2","Alias" : ["a","b"]})

    def test_parse_GFF3_duplicates(self):
        with warnings.catch_warnings(record=True) as warns:
            warnings.simplefilter("always")
            found = parse_GFF3_tokens("Note=x;Note=y;foo=1;foo=2")
        self.assertEqual(found["Note"],["x","y"])
        self.assertEqual(found["foo"],"1,2")
        self.assertEqual(len(warns),2)
        self.assertTrue(all(issubclass(X.category,FileFormatWarning) for X in warns))

    def test_parse_GTF2_tokens(self):
        found = parse_GTF2_tokens('gene_id "mygene"; transcript_id "mytranscript"; gene_name "My gene";')
        self.assertEqual(found,{"gene_id" : "mygene","transcript_id" : "mytranscript","gene_name" : "My gene"})

    def test_parse_GTF2_duplicates(self):
        with warnings.catch_warnings(record=True):
            warnings.simplefilter("always")
            found = parse_GTF2_tokens('tag "a"; tag "b";')
        self.assertEqual(found["tag"],"a,b")

    def test_parse_attributes_chooses_grammar(self):
        self.assertEqual(parse_attributes("ID=a",3),{"ID" : "a"})
        self.assertEqual(parse_attributes('gene_id "a";',2.5),{"gene_id" : "a"})
        self.assertEqual(parse_attributes('gene_id "a";',2),{"gene_id" : "a"})
