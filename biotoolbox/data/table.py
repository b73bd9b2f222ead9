#!/usr/bin/env python
"""Row-oriented storage for |Data| tables.

A |DataTable| is a list of rows. Row 0 holds the column names; rows 1 to
:attr:`DataTable.last_row` hold cell values. Every row always has exactly
:attr:`DataTable.number_columns` cells. Missing values are represented by
the placeholder :data:`PLACEHOLDER`.

|DataTable| knows nothing about column metadata. Keeping names in the
metadata registry and row 0 in agreement is the job of |Data|, which owns both.
"""
import numbers
from biotoolbox.util.services.exceptions import ShapeMismatchError

PLACEHOLDER = "."
"""Value used to pad missing cells"""


def is_null(value):
    """Return `True` if `value` is `None`, empty, or the placeholder"""
    return value is None or value == "" or value == PLACEHOLDER


class DataTable(object):
    """Two-dimensional container of rows and columns, with a header row

    Parameters
    ----------
    names : list of str, optional
        Initial column names
    """

    def __init__(self,names=None):
        self._rows = [list(names or [])]

    def __repr__(self):
        return "<DataTable %s rows x %s columns>" % (self.last_row,self.number_columns)

    def __eq__(self,other):
        return isinstance(other,DataTable) and self._rows == other._rows

    @property
    def number_columns(self):
        """Number of columns"""
        return len(self._rows[0])

    @property
    def last_row(self):
        """Index of last row. Because row 0 is the header, this equals the
        number of data rows"""
        return len(self._rows) - 1

    def _valid_row(self,row):
        return isinstance(row,numbers.Integral) and 0 <= row < len(self._rows)

    def _valid_column(self,column):
        return isinstance(column,numbers.Integral) and 0 <= column < self.number_columns

    def in_bounds(self,row=None,column=None):
        """Test whether `row` and/or `column` refer to existing cells

        Returns
        -------
        bool
        """
        if row is not None and not self._valid_row(row):
            return False
        if column is not None and not self._valid_column(column):
            return False
        return True

    # columns ------------------------------------------------------------------

    def append_column(self,values):
        """Append a column at the rightmost position

        Parameters
        ----------
        values : list
            Column header followed by one value per data row. If the table has
            data rows, `len(values)` must equal `last_row + 1`. If it has none,
            `values` defines the data rows, and other columns are padded.

        Returns
        -------
        int
            Index of new column

        Raises
        ------
        |ShapeMismatchError|
            if `values` is empty or its length does not match the table.
            The table is left unchanged.
        """
        values = list(values)
        if len(values) == 0:
            raise ShapeMismatchError("Column must at least contain a header")

        if self.last_row > 0 and len(values) != self.last_row + 1:
            raise ShapeMismatchError("Column has %s values but table has %s rows" % (len(values)-1,self.last_row))

        new_index = self.number_columns
        if self.last_row == 0:
            for _ in range(len(values) - 1):
                self._rows.append([PLACEHOLDER] * new_index)

        for row, value in zip(self._rows,values):
            row.append(value)

        return new_index

    def delete_columns(self,*indices):
        """Delete one or more columns. Invalid indices are ignored.
        Columns are removed from highest to lowest index.

        Returns
        -------
        list of int
            Indices that were deleted, in descending order
        """
        deleted = sorted(set(X for X in indices if self._valid_column(X)),reverse=True)
        for row in self._rows:
            for i in deleted:
                del row[i]
        return deleted

    def reorder_columns(self,order):
        """Rebuild every row as a projection of current columns

        Parameters
        ----------
        order : list of int
            Column indices in new order. May repeat or omit columns.

        Raises
        ------
        IndexError
            if any index in `order` does not exist. The table is left unchanged.
        """
        order = list(order)
        for i in order:
            if not self._valid_column(i):
                raise IndexError("No column at index %s" % i)
        self._rows = [[row[X] for X in order] for row in self._rows]

    def column_values(self,column):
        """Return a copy of a column, header first, or `None` if out of range"""
        if not self._valid_column(column):
            return None
        return [row[column] for row in self._rows]

    def set_header(self,column,name):
        self._rows[0][column] = name

    def header(self):
        """Return a copy of the header row"""
        return list(self._rows[0])

    # rows ---------------------------------------------------------------------

    def add_row(self,values=None):
        """Append a row. Missing trailing cells are filled with :data:`PLACEHOLDER`,
        and excess values are dropped.

        Parameters
        ----------
        values : list, optional
            Cell values

        Returns
        -------
        int
            Index of new row
        """
        values = [] if values is None else list(values)[:self.number_columns]
        values.extend([PLACEHOLDER] * (self.number_columns - len(values)))
        self._rows.append(values)
        return self.last_row

    def delete_rows(self,*indices):
        """Delete one or more data rows, from highest to lowest index.
        The header row and invalid indices are ignored.

        Returns
        -------
        list of int
            Indices that were deleted, in descending order
        """
        deleted = sorted(set(X for X in indices if self._valid_row(X) and X > 0),reverse=True)
        for i in deleted:
            del self._rows[i]
        return deleted

    def row_values(self,row):
        """Return a copy of a row, or `None` if out of range"""
        if not self._valid_row(row):
            return None
        return list(self._rows[row])

    def value(self,row,column,new_value=None):
        """Get or set a single cell. Out-of-range coordinates return `None`
        and change nothing."""
        if not (self._valid_row(row) and self._valid_column(column)):
            return None
        if new_value is not None:
            self._rows[row][column] = new_value
        return self._rows[row][column]

    def data_rows(self):
        """Return the list of data rows (excluding the header). The list is
        new, but its rows are the live rows of the table."""
        return self._rows[1:]

    def set_data_rows(self,rows):
        """Replace all data rows with `rows`, keeping the header

        Raises
        ------
        |ShapeMismatchError|
            if any row has the wrong number of cells
        """
        rows = list(rows)
        for row in rows:
            if len(row) != self.number_columns:
                raise ShapeMismatchError("Row has %s cells, expected %s" % (len(row),self.number_columns))
        self._rows = [self._rows[0]] + rows

    def keep_rows(self,first,last):
        """Keep only data rows `first` to `last`, inclusive (1-based)"""
        self._rows = [self._rows[0]] + self._rows[first:last+1]

    def clear(self,names=None):
        """Remove all rows and columns, optionally starting a new header"""
        self._rows = [list(names or [])]
