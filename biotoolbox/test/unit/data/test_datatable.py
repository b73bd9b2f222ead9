#!/usr/bin/env python
"""Test suite for :py:mod:`biotoolbox.data.table`"""
import unittest
import pytest

from biotoolbox.data.table import DataTable, PLACEHOLDER, is_null
from biotoolbox.util.services.exceptions import ShapeMismatchError


@pytest.mark.unit
class TestIsNull(unittest.TestCase):

    def test_is_null(self):
        for value in (None,"","."):
            self.assertTrue(is_null(value))
        for value in ("0",0,"a"," ."):
            self.assertFalse(is_null(value))


@pytest.mark.unit
class TestDataTable(unittest.TestCase):

    def setUp(self):
        self.table = DataTable(["Name","Score"])
        self.table.add_row(["a","1"])
        self.table.add_row(["b","2"])
        self.table.add_row(["c","3"])

    def check_rectangular(self,table):
        for row in range(table.last_row+1):
            self.assertEqual(len(table.row_values(row)),table.number_columns)

    def test_shape(self):
        self.assertEqual(self.table.number_columns,2)
        self.assertEqual(self.table.last_row,3)
        self.assertEqual(DataTable().last_row,0)

    def test_append_column_to_empty_table_defines_rows(self):
        table = DataTable(["Name"])
        self.assertEqual(table.append_column(["Score","1","2"]),1)
        self.assertEqual(table.last_row,2)
        self.assertEqual(table.row_values(1),[PLACEHOLDER,"1"])
        self.check_rectangular(table)

    def test_append_column_wrong_length(self):
        before = [self.table.row_values(X) for X in range(4)]
        self.assertRaises(ShapeMismatchError,self.table.append_column,["New","1","2"])
        self.assertRaises(ShapeMismatchError,self.table.append_column,[])
        self.assertEqual(before,[self.table.row_values(X) for X in range(4)])

    def test_delete_columns(self):
        self.table.append_column(["Third","x","y","z"])
        self.assertEqual(self.table.delete_columns(0,2,7),[2,0])
        self.assertEqual(self.table.header(),["Score"])
        self.check_rectangular(self.table)

    def test_reorder_columns(self):
        self.table.reorder_columns([1,0,1])
        self.assertEqual(self.table.header(),["Score","Name","Score"])
        self.assertEqual(self.table.row_values(2),["2","b","2"])

    def test_reorder_columns_invalid_unchanged(self):
        self.assertRaises(IndexError,self.table.reorder_columns,[0,5])
        self.assertEqual(self.table.header(),["Name","Score"])

    def test_add_row_pads_and_truncates(self):
        self.assertEqual(self.table.add_row(["d"]),4)
        self.assertEqual(self.table.row_values(4),["d",PLACEHOLDER])
        self.table.add_row(["e","5","extra"])
        self.assertEqual(self.table.row_values(5),["e","5"])
        self.table.add_row()
        self.assertEqual(self.table.row_values(6),[PLACEHOLDER,PLACEHOLDER])

    def test_delete_rows_protects_header(self):
        self.assertEqual(self.table.delete_rows(0,3,1,9),[3,1])
        self.assertEqual(self.table.header(),["Name","Score"])
        self.assertEqual(self.table.last_row,1)
        self.assertEqual(self.table.row_values(1),["b","2"])

    def test_value(self):
        self.assertEqual(self.table.value(1,1),"1")
        self.assertEqual(self.table.value(1,1,"10"),"10")
        self.assertEqual(self.table.value(1,1),"10")
        self.assertIsNone(self.table.value(10,0))
        self.assertIsNone(self.table.value(1,5,"x"))

    def test_column_values(self):
        self.assertEqual(self.table.column_values(0),["Name","a","b","c"])
        self.assertIsNone(self.table.column_values(2))

    def test_set_data_rows(self):
        self.table.set_data_rows([["z","0"]])
        self.assertEqual(self.table.last_row,1)
        self.assertRaises(ShapeMismatchError,self.table.set_data_rows,[["z"]])

    def test_keep_rows(self):
        self.table.keep_rows(2,3)
        self.assertEqual(self.table.column_values(0),["Name","b","c"])

    def test_in_bounds(self):
        self.assertTrue(self.table.in_bounds(3,1))
        self.assertTrue(self.table.in_bounds(0))
        self.assertFalse(self.table.in_bounds(4))
        self.assertFalse(self.table.in_bounds(column=2))
        self.assertFalse(self.table.in_bounds(-1,0))

    def test_clear(self):
        self.table.clear(["A"])
        self.assertEqual(self.table.header(),["A"])
        self.assertEqual(self.table.last_row,0)
