#!/usr/bin/env python
"""Per-column metadata for |Data| tables.

Each column of a table owns a dictionary of descriptive key-value pairs.
Two keys are mandatory:

    =========   ===========================================================
    Key         Meaning
    ---------   -----------------------------------------------------------
    `index`     0-based position of the column. Always equal to the column's
                actual position; renumbered after every structural change.
    `name`      Column header, mirrored into row 0 of the table
    =========   ===========================================================

Any other key is free-form, e.g. the dataset a score was collected from,
a `log2` flag, or the `start` and `stop` of a genomic window.
"""
import copy
import numbers

RESERVED_KEYS = ("index","name")


class ColumnMetadata(object):
    """Ordered registry of column metadata, indexed by column position

    Parameters
    ----------
    names : list of str, optional
        Names of initial columns
    """

    def __init__(self,names=None):
        self._columns = []
        for name in names or []:
            self.append(name)

    def __len__(self):
        return len(self._columns)

    def __contains__(self,index):
        return self._valid(index)

    def __iter__(self):
        return iter(range(len(self._columns)))

    def __repr__(self):
        return "<ColumnMetadata %s columns>" % len(self)

    def __eq__(self,other):
        return isinstance(other,ColumnMetadata) and self._columns == other._columns

    def _valid(self,index):
        return isinstance(index,numbers.Integral) and 0 <= index < len(self._columns)

    def _renumber(self):
        for i, md in enumerate(self._columns):
            md["index"] = i

    def names(self):
        """Return column names in index order"""
        return [X["name"] for X in self._columns]

    def append(self,name,**extra):
        """Register a new rightmost column

        Parameters
        ----------
        name : str
            Column name

        extra : keyword arguments
            Additional metadata for the column

        Returns
        -------
        int
            Index of new column
        """
        md = dict(extra)
        md["name"] = name
        md["index"] = len(self._columns)
        self._columns.append(md)
        return md["index"]

    def get(self,index,key=None):
        """Return a copy of the metadata of a column, or a single value

        Parameters
        ----------
        index : int
            Column index

        key : str, optional
            If given, return only the value for `key`

        Returns
        -------
        dict, object, or `None` if `index` or `key` is not present
        """
        if not self._valid(index):
            return None
        if key is None:
            return dict(self._columns[index])
        return self._columns[index].get(key)

    def set(self,index,key,value):
        """Set metadata `key` of column `index` to `value`. The `index` key
        cannot be set.

        Returns
        -------
        bool
            `True` if the value was set
        """
        if not self._valid(index) or key == "index":
            return False
        self._columns[index][key] = value
        return True

    def delete(self,index,key=None):
        """Delete metadata key `key` from column `index`, or all non-reserved
        keys if `key` is `None`. `name` and `index` cannot be deleted.

        Returns
        -------
        bool
            `True` if anything was deleted
        """
        if not self._valid(index):
            return False
        md = self._columns[index]
        if key is None:
            keys = [X for X in md if X not in RESERVED_KEYS]
        elif key in md and key not in RESERVED_KEYS:
            keys = [key]
        else:
            return False
        for k in keys:
            del md[k]
        return len(keys) > 0

    def copy_extra(self,source,target):
        """Copy all metadata except `name` and `index` from column `source` to `target`

        Returns
        -------
        bool
        """
        if not (self._valid(source) and self._valid(target)):
            return False
        for k, v in self._columns[source].items():
            if k not in RESERVED_KEYS:
                self._columns[target][k] = copy.deepcopy(v)
        return True

    def extra(self,index):
        """Return metadata of column `index` other than `name` and `index`"""
        return { K : V for K, V in self._columns[index].items() if K not in RESERVED_KEYS }

    def remove(self,*indices):
        """Remove metadata for one or more columns, renumbering the rest.
        Invalid indices are ignored.
        """
        for i in sorted(set(X for X in indices if self._valid(X)),reverse=True):
            del self._columns[i]
        self._renumber()

    def reorder(self,order):
        """Rebuild the registry as a projection of current columns. Indices
        may be repeated (each repeat receiving its own copy) or omitted.

        Parameters
        ----------
        order : list of int
            Current column indices, in new order
        """
        self._columns = [copy.deepcopy(self._columns[X]) for X in order]
        self._renumber()

    def clear(self):
        """Remove all columns"""
        self._columns = []

    def replace(self,other):
        """Replace contents with a copy of those of |ColumnMetadata| `other`"""
        self._columns = copy.deepcopy(other._columns)
        self._renumber()
