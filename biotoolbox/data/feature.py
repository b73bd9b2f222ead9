#!/usr/bin/env python
"""Row-by-row access to |Data| tables.

|DataIterator| walks the data rows of a table once, from first to last,
yielding a |RowFeature| for each. A |RowFeature| is a light handle on a
single row: it stores only the table and the row index, and resolves named
attributes such as :attr:`~RowFeature.chromo` or :attr:`~RowFeature.start`
by looking up column aliases (see :mod:`biotoolbox.data.columns`) each time
they are used. Setting an attribute writes straight into the table.

Examples
--------
Print the coordinates of every feature in a table::

    >>> for feature in data.row_stream():
    >>>     print(feature.chromo, feature.start, feature.end, feature.strand)
"""
from biotoolbox.data.table import is_null

_STRAND_VALUES = {
    "+"  : 1,
    "1"  : 1,
    "+1" : 1,
    "f"  : 1,
    "w"  : 1,
    "-"  : -1,
    "-1" : -1,
    "r"  : -1,
    "c"  : -1,
}


def _to_int(value):
    try:
        return int(value)
    except (TypeError,ValueError):
        try:
            return int(float(value))
        except (TypeError,ValueError):
            return value


class RowFeature(object):
    """Handle on one data row of a |Data| table

    Parameters
    ----------
    data : |Data|
        Table containing row

    row_index : int
        Index of row
    """

    __slots__ = ("data","row_index")

    def __init__(self,data,row_index):
        self.data = data
        self.row_index = row_index

    def __repr__(self):
        return "<RowFeature row %s of %s>" % (self.row_index,self.data)

    def value(self,column,new_value=None):
        """Get or set the value in `column` of this row

        Parameters
        ----------
        column : int
            Column index

        new_value : object, optional
            If not `None`, replace the current value

        Returns
        -------
        object
            Value of cell, or `None` if `column` does not exist
        """
        return self.data.value(self.row_index,column,new_value)

    def row_values(self):
        """Return a copy of all values in this row"""
        return self.data.row_values(self.row_index)

    def _get_role(self,role):
        index = self.data.role_column(role)
        if index is None:
            return None
        return self.data.value(self.row_index,index)

    def _set_role(self,role,value):
        index = self.data.role_column(role)
        if index is not None:
            self.data.value(self.row_index,index,str(value))

    @property
    def seq_id(self):
        """Chromosome name, or `None` if the table has no chromosome column"""
        return self._get_role("chromosome")

    @seq_id.setter
    def seq_id(self,value):
        self._set_role("chromosome",value)

    chromo = seq_id

    @property
    def start(self):
        """Start coordinate, as int if numeric"""
        v = self._get_role("start")
        return None if v is None else _to_int(v)

    @start.setter
    def start(self,value):
        self._set_role("start",value)

    @property
    def end(self):
        """End coordinate, as int if numeric"""
        v = self._get_role("stop")
        return None if v is None else _to_int(v)

    @end.setter
    def end(self,value):
        self._set_role("stop",value)

    stop = end

    @property
    def strand(self):
        """Strand as an integer: `1` for forward, `-1` for reverse, and `0`
        if unstranded or if the table has no strand column"""
        v = self._get_role("strand")
        if v is None:
            return 0
        return _STRAND_VALUES.get(str(v).strip().lower(),0)

    @strand.setter
    def strand(self,value):
        self._set_role("strand",value)

    @property
    def name(self):
        return self._get_role("name")

    @name.setter
    def name(self,value):
        self._set_role("name",value)

    @property
    def type(self):
        return self._get_role("type")

    @type.setter
    def type(self,value):
        self._set_role("type",value)

    @property
    def id(self):
        return self._get_role("id")

    @id.setter
    def id(self,value):
        self._set_role("id",value)

    @property
    def length(self):
        """Length of feature, inclusive of both ends, or `None` if start and end
        are not both known"""
        start, end = self.start, self.end
        if isinstance(start,int) and isinstance(end,int):
            return end - start + 1
        return None

    @property
    def coordinate(self):
        """Feature location as a string of form ``chromosome:start-end``,
        or `None` if no chromosome or start is known"""
        chrom, start = self.seq_id, self._get_role("start")
        if is_null(chrom) or is_null(start):
            return None
        end = self._get_role("stop")
        if is_null(end):
            end = start
        return "%s:%s-%s" % (chrom,start,end)


class DataIterator(object):
    """Single-pass iterator over data rows of a |Data| table

    The cursor starts at row 1 and moves forward only. Once past
    :attr:`Data.last_row <biotoolbox.data.core.Data.last_row>`, the iterator
    is exhausted and stays exhausted, even if rows are added later.

    Parameters
    ----------
    data : |Data|
    """

    def __init__(self,data):
        self.data = data
        self.cursor = 1
        self._exhausted = False

    def __iter__(self):
        return self

    def next_row(self):
        """Return a |RowFeature| for the next row, or `None` once finished"""
        if self._exhausted or self.cursor > self.data.last_row:
            self._exhausted = True
            return None
        feature = RowFeature(self.data,self.cursor)
        self.cursor += 1
        return feature

    def __next__(self):
        feature = self.next_row()
        if feature is None:
            raise StopIteration
        return feature

    @property
    def row_index(self):
        """Index of the row most recently returned"""
        return self.cursor - 1
