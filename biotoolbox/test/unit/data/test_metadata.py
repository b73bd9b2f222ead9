#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.data.metadata`"""
import unittest
import pytest

from biotoolbox.data.metadata import ColumnMetadata


@pytest.mark.unit
class TestColumnMetadata(unittest.TestCase):

    def setUp(self):
        self.md = ColumnMetadata(["Name","Score","Other"])
        self.md.set(1,"dataset","H3K4me3")
        self.md.set(1,"log2",1)

    def check_indices(self):
        for i in self.md:
            self.assertEqual(self.md.get(i,"index"),i)

    def test_append_returns_index(self):
        self.assertEqual(self.md.append("New",dataset="foo"),3)
        self.assertEqual(self.md.get(3),{"name" : "New","index" : 3,"dataset" : "foo"})

    def test_get_returns_copy(self):
        found = self.md.get(1)
        found["dataset"] = "changed"
        self.assertEqual(self.md.get(1,"dataset"),"H3K4me3")

    def test_get_out_of_range(self):
        self.assertIsNone(self.md.get(10))
        self.assertIsNone(self.md.get(-1))
        self.assertIsNone(self.md.get(0,"nokey"))

    def test_set_refuses_index(self):
        self.assertFalse(self.md.set(0,"index",5))
        self.assertEqual(self.md.get(0,"index"),0)

    def test_delete_single_key(self):
        self.assertTrue(self.md.delete(1,"dataset"))
        self.assertIsNone(self.md.get(1,"dataset"))
        self.assertEqual(self.md.get(1,"log2"),1)

    def test_delete_all_extra_keeps_reserved(self):
        self.assertTrue(self.md.delete(1))
        self.assertEqual(self.md.get(1),{"name" : "Score","index" : 1})
        self.assertFalse(self.md.delete(1,"name"))
        self.assertFalse(self.md.delete(1,"index"))

    def test_copy_extra(self):
        self.assertTrue(self.md.copy_extra(1,2))
        self.assertEqual(self.md.get(2,"dataset"),"H3K4me3")
        self.assertEqual(self.md.get(2,"name"),"Other")
        self.assertEqual(self.md.get(2,"index"),2)
        self.assertFalse(self.md.copy_extra(1,8))

    def test_remove_renumbers(self):
        self.md.remove(0)
        self.assertEqual(self.md.names(),["Score","Other"])
        self.check_indices()

    def test_remove_ignores_invalid(self):
        self.md.remove(0,0,15)
        self.assertEqual(len(self.md),2)
        self.check_indices()

    def test_reorder_repeats_are_independent(self):
        self.md.reorder([1,1,0])
        self.assertEqual(self.md.names(),["Score","Score","Name"])
        self.check_indices()
        self.md.set(0,"dataset","changed")
        self.assertEqual(self.md.get(1,"dataset"),"H3K4me3")

    def test_extra(self):
        self.assertEqual(self.md.extra(1),{"dataset" : "H3K4me3","log2" : 1})
        self.assertEqual(self.md.extra(0),{})

    def test_replace_and_clear(self):
        other = ColumnMetadata(["a","b"])
        self.md.replace(other)
        self.assertEqual(self.md,other)
        self.md.set(0,"foo","bar")
        self.assertIsNone(other.get(0,"foo"))
        self.md.clear()
        self.assertEqual(len(self.md),0)

    def test_contains(self):
        self.assertTrue(2 in self.md)
        self.assertFalse(3 in self.md)
