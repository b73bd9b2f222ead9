#!/usr/bin/env python
"""The |Data| table, a tab-delimited table of genomic features plus metadata.

A |Data| object composes:

  - a |DataTable|, holding a header row of column names and data rows of values

  - a |ColumnMetadata| registry, holding key-value metadata for each column

  - table-wide metadata: the `program` that wrote it, the `database` from which
    features were collected, the kind of `feature` listed, GFF and BED markers,
    and free-text comments

Tables are loaded from and saved to files with
:mod:`biotoolbox.readers.table_file`, sorted with
:mod:`biotoolbox.data.sorting`, and split and merged for parallel work with
:mod:`biotoolbox.data.partition`.

Recoverable problems, like a column of the wrong length, leave the table
unchanged, issue a |DataWarning|, and return `None` or `False`.
Out-of-range reads return `None` unless the table was created with
`strict=True`, in which case they raise :class:`IndexError`.


Examples
--------
Load a table, add a column, sort by genomic position, and save::

    >>> data = Data("genes.txt")
    >>> col = data.add_column("Length")
    >>> for feature in data.row_stream():
    >>>     feature.value(col,feature.length)
    >>> data.gsort_data()
    >>> data.save("genes_with_length.txt")

Make a new list of 500 bp windows across a genome::

    >>> data = Data(database="hg19.2bit",feature="genome",win=500,step=500)
"""
import os
import numpy
import pandas as pd

from biotoolbox.data.table import DataTable, PLACEHOLDER, is_null
from biotoolbox.data.metadata import ColumnMetadata
from biotoolbox.data.feature import DataIterator
from biotoolbox.data import columns as bt_columns
from biotoolbox.data.sorting import sort_rows, gsort_rows, parse_direction
from biotoolbox.data.partition import part_bounds, read_children
from biotoolbox.readers.table_file import TableFile, read_table_file, write_table_file,\
                                          classify_format, split_filename
from biotoolbox.genomics.sources import open_source, FeatureLister, ChromosomeSizeSource
from biotoolbox.genomics.lists import get_new_feature_list, get_new_genome_list
from biotoolbox.util.config import ToolboxConfig
from biotoolbox.util.io.openers import NullWriter
from biotoolbox.util.services.exceptions import ShapeMismatchError, UnresolvableColumnError,\
                                                DataWarning, warn

SUMMARY_SKIP_NAMES = { "systematicname","name","id","alias","aliases","type","class",
                       "geneclass","chromosome","chromo","seq_id","seqid","start","stop",
                       "end","gene","strand","length","primary_id" }
"""Lower-cased names of descriptive columns, skipped when summarizing data columns"""


def _is_true(value):
    return value not in (None,"",0,"0",False,"false","False",".")


class Data(object):
    """Table of genomic features with per-column metadata

    Parameters
    ----------
    file : str, optional
        Table file to load

    columns : list of str, optional
        Names of columns for a new, empty table

    feature : str, optional
        Kind of feature listed. With `database`, a new list is generated:
        `"genome"` tiles chromosomes with windows, and anything else lists
        annotated features of that type.

    database : str, optional
        Database alias or file (see :func:`~biotoolbox.genomics.sources.open_source`)

    win, step : int, optional
        Window and step sizes for genome lists (Default: from `config`)

    exclude : list of str, optional
        Regular expressions for chromosomes to leave out of genome lists

    config : |ToolboxConfig|, optional
        Configuration (Default: defaults only)

    printer : file-like, optional
        Logger implementing a ``write()`` method (Default: |NullWriter|)

    strict : bool, optional
        If `True`, out-of-range reads raise :class:`IndexError` (Default: `False`)
    """

    def __init__(self,file=None,columns=None,feature=None,database=None,win=None,step=None,
                 exclude=None,config=None,printer=None,strict=False):
        self.config   = ToolboxConfig() if config is None else config
        self.printer  = NullWriter() if printer is None else printer
        self.strict   = strict

        self._table    = DataTable()
        self._metadata = ColumnMetadata()
        self._comments = []
        self._db       = None

        self.program  = None
        self.database = database
        self.feature  = feature
        self.gff      = 0
        self.bed      = 0
        self.headers  = True
        self.filename = None

        if file is not None:
            self.load_file(file)
            if database is not None:
                self.database = database
        elif database is not None and feature is not None:
            source = self.open_database()
            if feature == "genome":
                if not isinstance(source,ChromosomeSizeSource):
                    raise ValueError("Database '%s' cannot report chromosome sizes." % database)
                win  = self.config.default_window if win is None else win
                step = self.config.default_step if step is None else step
                get_new_genome_list(self,source,win,step,exclude=exclude,printer=self.printer)
            else:
                if not isinstance(source,FeatureLister):
                    raise ValueError("Database '%s' cannot list features." % database)
                get_new_feature_list(self,source,feature,printer=self.printer)
        else:
            for name in columns or []:
                self.add_column(name)

    def __repr__(self):
        return "<Data %s rows x %s columns%s>" % (self.last_row,self.number_columns,
                                                  "" if self.filename is None else " from %s" % self.filename)

    def __getstate__(self):
        state = dict(self.__dict__)
        state["_db"]     = None
        state["printer"] = None
        return state

    def __setstate__(self,state):
        self.__dict__.update(state)
        self.printer = NullWriter()

    def _check(self,row=None,column=None):
        if self._table.in_bounds(row,column):
            return True
        if self.strict:
            raise IndexError("No cell at row %s, column %s" % (row,column))
        return False

    #===========================================================================
    # general metadata
    #===========================================================================

    @property
    def number_columns(self):
        """Number of columns"""
        return self._table.number_columns

    @property
    def last_row(self):
        """Index of the last data row, which equals the number of data rows"""
        return self._table.last_row

    @property
    def path(self):
        return None if self.filename is None else split_filename(self.filename)[0]

    @property
    def basename(self):
        return None if self.filename is None else split_filename(self.filename)[1]

    @property
    def extension(self):
        return None if self.filename is None else split_filename(self.filename)[2]

    @property
    def feature_type(self):
        """`"coordinate"` if rows have chromosome and start positions, `"named"`
        if rows are identified by name, type, or ID, otherwise `"unknown"`"""
        if self.chromo_column() is not None and self.start_column() is not None:
            return "coordinate"
        for role in ("name","type","id"):
            if self.role_column(role) is not None:
                return "named"
        return "unknown"

    def comments(self):
        """Return a copy of the comment lines"""
        return list(self._comments)

    def add_comment(self,text):
        """Append a comment line"""
        self._comments.append(str(text).rstrip("\n"))
        return len(self._comments) - 1

    def delete_comment(self,index=None):
        """Delete comment at `index`, or all comments if `index` is `None`"""
        if index is None:
            self._comments = []
        elif 0 <= index < len(self._comments):
            del self._comments[index]
        else:
            return False
        return True

    #===========================================================================
    # columns
    #===========================================================================

    def list_columns(self):
        """Return column names in index order"""
        return self._metadata.names()

    def name(self,index,new_name=None):
        """Get or set the name of column `index`. Renaming updates both the
        metadata and the header row.

        Returns
        -------
        str or None
        """
        if not self._check(column=index):
            return None
        if new_name is not None:
            self._metadata.set(index,"name",new_name)
            self._table.set_header(index,new_name)
        return self._metadata.get(index,"name")

    def metadata(self,index,key=None,value=None):
        """Get or set metadata of column `index`

        Parameters
        ----------
        index : int
            Column index

        key : str, optional
            Metadata key. If `None`, a copy of all metadata for the column is returned.

        value : object, optional
            If not `None`, set `key` to `value`. The `index` key cannot be set.

        Returns
        -------
        dict, object, or `None`
        """
        if not self._check(column=index):
            return None
        if key is None:
            return self._metadata.get(index)
        if value is not None:
            if key == "name":
                return self.name(index,value)
            self._metadata.set(index,key,value)
        return self._metadata.get(index,key)

    def copy_metadata(self,source,target):
        """Copy metadata, except `name` and `index`, from column `source` to `target`"""
        return self._metadata.copy_extra(source,target)

    def delete_metadata(self,index,key=None):
        """Delete metadata `key` of column `index`, or all keys except `name`
        and `index` if `key` is `None`"""
        return self._metadata.delete(index,key)

    def add_column(self,name):
        """Add a column at the rightmost position

        Parameters
        ----------
        name : str or list
            If a str, the name of a new column, filled with placeholders.
            If a list, the column's name followed by one value per data row.

        Returns
        -------
        int or None
            Index of the new column, or `None` if `name` was empty or the
            list had the wrong length
        """
        if isinstance(name,str):
            if len(name) == 0:
                return None
            values = [name] + [PLACEHOLDER] * self.last_row
        else:
            values = list(name)

        try:
            index = self._table.append_column(values)
        except ShapeMismatchError as e:
            warn("Column '%s' has a different number of elements than the Data table. %s" % (values[0] if values else "",e),
                 DataWarning)
            return None

        self._metadata.append(values[0])
        return index

    def copy_column(self,index):
        """Duplicate column `index`, with its metadata, at the rightmost position

        Returns
        -------
        int or None
            Index of new column
        """
        if not self._check(column=index):
            return None
        new_index = self.add_column(self._table.column_values(index))
        self._metadata.copy_extra(index,new_index)
        return new_index

    def delete_column(self,*indices):
        """Delete one or more columns. Remaining columns are renumbered."""
        deleted = self._table.delete_columns(*indices)
        self._metadata.remove(*deleted)
        return len(deleted) > 0

    def reorder_column(self,*indices):
        """Rearrange columns. Columns may be repeated, with independent copies
        of their metadata, or omitted, which deletes them.

        Examples
        --------
        Swap first two columns of a three-column table, and repeat the third::

            >>> data.reorder_column(1,0,2,2)

        Returns
        -------
        bool
            `False` if any index is out of range, in which case nothing changes
        """
        try:
            self._table.reorder_columns(indices)
        except IndexError as e:
            warn("Cannot reorder columns: %s. Table not changed." % e,DataWarning)
            return False
        self._metadata.reorder(indices)
        return True

    def column_values(self,column):
        """Return a copy of all values in `column`, starting with its name"""
        if not self._check(column=column):
            return None
        return self._table.column_values(column)

    def find_column(self,pattern):
        """Return the index of the first column whose name contains a
        case-insensitive match to regular expression `pattern`, or `None`"""
        return bt_columns.find_column(self.list_columns(),pattern)

    def role_column(self,role):
        """Return the index of the first column named by an alias of `role`
        (see :data:`~biotoolbox.data.columns.COLUMN_ALIASES`), or `None`"""
        return bt_columns.role_column(self.list_columns(),role)

    def chromo_column(self):
        return self.role_column("chromosome")

    def start_column(self):
        return self.role_column("start")

    def stop_column(self):
        return self.role_column("stop")

    end_column = stop_column

    def strand_column(self):
        return self.role_column("strand")

    def name_column(self):
        return self.role_column("name")

    def type_column(self):
        return self.role_column("type")

    def id_column(self):
        return self.role_column("id")

    #===========================================================================
    # rows & cells
    #===========================================================================

    def add_row(self,values=None):
        """Append a row. Short rows are padded with placeholders; values
        beyond the number of columns are dropped with a |DataWarning|.

        Returns
        -------
        int
            Index of new row
        """
        if values is not None and len(values) > self.number_columns:
            warn("Row has more elements than table columns (%s > %s). Truncating row." % (len(values),self.number_columns),
                 DataWarning)
        return self._table.add_row(values)

    def delete_row(self,*indices):
        """Delete one or more data rows"""
        return len(self._table.delete_rows(*indices)) > 0

    def row_values(self,row):
        """Return a copy of all values in `row`"""
        if not self._check(row=row):
            return None
        return self._table.row_values(row)

    def value(self,row,column,new_value=None):
        """Get or set one cell. Setting a cell in row 0 renames the column.

        Returns
        -------
        object or None
            Value of cell, or `None` if out of range
        """
        if not self._check(row,column):
            return None
        if row == 0 and new_value is not None:
            return self.name(column,new_value)
        return self._table.value(row,column,new_value)

    def row_stream(self):
        """Return a |DataIterator| over data rows"""
        return DataIterator(self)

    def iterate(self,func):
        """Call `func` with a |RowFeature| for every data row

        Returns
        -------
        bool
            `False` if `func` is not callable
        """
        if not callable(func):
            warn("iterate() requires a callable, got %s" % type(func).__name__,DataWarning)
            return False
        for row in self.row_stream():
            func(row)
        return True

    def as_data_frame(self):
        """Return the table as a :class:`pandas.DataFrame`. Placeholders become
        `NaN` and numeric columns are converted to numbers.

        Returns
        -------
        :class:`pandas.DataFrame`
        """
        df = pd.DataFrame([list(X) for X in self._table.data_rows()],columns=self.list_columns())
        df = df.replace(".",numpy.nan)
        for col in df.columns:
            try:
                df[col] = pd.to_numeric(df[col])
            except (ValueError,TypeError):
                pass
        return df

    #===========================================================================
    # sorting
    #===========================================================================

    def sort_data(self,column,direction="i"):
        """Sort rows by the values in `column`

        The first non-null value decides the comparison: values containing a
        letter sort lexically, and numbers sort numerically. See
        :mod:`biotoolbox.data.sorting` for how ties are broken.

        Parameters
        ----------
        column : int
            Column to sort by

        direction : str, optional
            `"i"` (increasing, default) or `"d"` (decreasing). Only the first
            letter is considered, case-insensitively.

        Returns
        -------
        bool
            `True` if sorted
        """
        if not self._table.in_bounds(column=column):
            warn("No column at index %s. Data table not sorted." % column,DataWarning)
            return False
        d = parse_direction(direction)
        if d is None:
            warn("Unrecognized sort direction '%s'. Must be 'i' or 'd'." % direction,DataWarning)
            return False

        rows, method = sort_rows(self._table.data_rows(),column,d)
        self._table.set_data_rows(rows)
        self.printer.write("Data table sorted %sly by the contents of '%s'" % (method,self.name(column)))
        return True

    def gsort_data(self):
        """Sort rows by chromosome and then start position. Chromosomes with
        numeric names (e.g. `chr2`, `10`) come first in numeric order, followed
        by all others in lexical order.

        Returns
        -------
        bool
            `False` if chromosome or start columns cannot be identified
        """
        names = self.list_columns()
        try:
            chrom = bt_columns.require_column(names,"chromosome")
            start = bt_columns.require_column(names,"start")
        except UnresolvableColumnError as e:
            warn("%s. Data table not sorted." % e,DataWarning)
            return False

        self._table.set_data_rows(gsort_rows(self._table.data_rows(),chrom,start))
        self.printer.write("Data table sorted by genomic position")
        return True

    #===========================================================================
    # splitting & merging
    #===========================================================================

    def splice_data(self,part,total_parts):
        """Keep only the rows of one of `total_parts` equal parts of the table.
        The last part also receives any remainder rows. The cached database
        handle is dropped, so call :meth:`open_database` again if needed.

        Parameters
        ----------
        part : int
            Part to keep, from 1 to `total_parts`

        total_parts : int

        Raises
        ------
        ValueError
            if `part` or `total_parts` are invalid
        """
        first, last = part_bounds(self.last_row,part,total_parts)
        self._table.keep_rows(first,last)
        self._db = None
        return True

    def reload_children(self,*files):
        """Replace the contents of this table with the concatenated contents
        of child files written by parallel workers, then delete the files

        Structure (metadata, header, and comments) is taken from the first file.
        All files are read before the table is modified.

        Parameters
        ----------
        files : str
            Child files, in part order

        Returns
        -------
        int or None
            :attr:`last_row` of merged table, or `None` if no files were given

        Raises
        ------
        |MergeInconsistencyError|
            if child files have different numbers of columns. The table is not changed.
        """
        if len(files) == 0:
            return None

        merged = read_children(list(files),printer=self.printer)
        filename = self.filename
        self._adopt(merged)
        self.filename = filename
        self.verify()

        for f in files:
            os.remove(f)

        return self.last_row

    #===========================================================================
    # databases
    #===========================================================================

    def open_database(self,force=False):
        """Open (or return the cached) source named by :attr:`database`

        Parameters
        ----------
        force : bool, optional
            If `True`, open a new handle even if one is cached

        Returns
        -------
        |FeatureLister|, |ChromosomeSizeSource|, or `None` if no database is set
        """
        if self.database is None:
            return None
        if self._db is None or force:
            self._db = open_source(self.database,config=self.config)
        return self._db

    #===========================================================================
    # files
    #===========================================================================

    def _adopt(self,table_file):
        self._table    = table_file.table
        self._metadata = table_file.column_metadata
        self._comments = table_file.comments
        self.program  = table_file.program
        self.database = table_file.database
        self.feature  = table_file.feature
        self._db      = None
        self.gff      = table_file.gff
        self.bed      = table_file.bed
        self.headers  = table_file.headers
        self.filename = table_file.filename

    def _as_table_file(self):
        return TableFile(table=self._table,column_metadata=self._metadata,comments=self._comments,
                         program=self.program,database=self.database,feature=self.feature,
                         gff=self.gff,bed=self.bed,headers=self.headers,filename=self.filename)

    def load_file(self,filename):
        """Replace contents of this table with those of a table file"""
        self._adopt(read_table_file(filename,printer=self.printer))
        return True

    def verify(self):
        """Make metadata agree with the table, and reclassify the table as
        GFF, BED, or neither, based on its current columns

        Returns
        -------
        bool
        """
        header = self._table.header()
        while len(self._metadata) < len(header):
            self._metadata.append(header[len(self._metadata)])
        if len(self._metadata) > len(header):
            self._metadata.remove(*range(len(header),len(self._metadata)))
        for i, name in enumerate(header):
            if self._metadata.get(i,"name") != name:
                self._metadata.set(i,"name",name)

        self.gff, self.bed = classify_format(header,self.gff,self.bed)
        if not (self.gff or self.bed):
            self.headers = True
        return True

    def save(self,filename=None,gz=None):
        """Write the table to a file

        The extension is adjusted to the table's format: a table that is no
        longer BED or GFF is saved with ``.txt``.

        Parameters
        ----------
        filename : str, optional
            Destination (Default: the file from which the table was loaded)

        gz : bool or None, optional
            If `True`, compress with gzip. If `False`, do not. If `None`,
            follow the extension of `filename`.

        Returns
        -------
        str
            Name of file written
        """
        self.verify()
        written = write_table_file(self._as_table_file(),filename=filename,gz=gz)
        self.filename = written
        self.printer.write("Wrote %s rows to %s" % (self.last_row,written))
        return written

    write_file = save

    def summary_file(self,filename=None,startcolumn=None,stopcolumn=None,dataset=None,log=None):
        """Average each data column over all rows, and write the averages to
        a new file named ``<filename>_summed.txt``, with one row per column

        Parameters
        ----------
        filename : str, optional
            Base name of output (Default: the name of the loaded file)

        startcolumn : int, optional
            First column to summarize (Default: first column whose name does
            not describe features, e.g. not `Name` or `Start`)

        stopcolumn : int, optional
            Last column to summarize (Default: last column)

        dataset : str, optional
            Dataset name recorded in output (Default: `dataset` metadata of
            start column, or `"data_scores"`)

        log : bool, optional
            Whether values are log2 (Default: `log2` metadata of start column).
            Log values are averaged on a linear scale.

        Returns
        -------
        str or None
            Name of file written, or `None` if no filename or start column can be found
        """
        self.verify()
        if filename is None:
            if not self.basename:
                warn("No filename given for summary file.",DataWarning)
                return None
            filename = os.path.join(self.path,self.basename)

        if startcolumn is None:
            candidates = [X for X, Y in enumerate(self.list_columns()) if str(Y).lower() not in SUMMARY_SKIP_NAMES]
            if len(candidates) == 0:
                warn("No data columns to summarize.",DataWarning)
                return None
            startcolumn = candidates[0]
        if stopcolumn is None:
            stopcolumn = self.number_columns - 1
        if dataset is None:
            dataset = self.metadata(startcolumn,"dataset") or "data_scores"
        if log is None:
            log = _is_true(self.metadata(startcolumn,"log2"))

        summed = Data(columns=["Window","Midpoint",self.basename or dataset],
                      feature="averaged_windows",config=self.config,printer=self.printer)
        summed.database = self.database
        summed.metadata(0,"number_features",self.last_row)
        summed.metadata(2,"log2",1 if log else 0)
        summed.metadata(2,"dataset",dataset)

        for column in range(startcolumn,stopcolumn+1):
            try:
                midpoint = int(numpy.mean([float(self.metadata(column,"start")),
                                           float(self.metadata(column,"stop"))]))
            except (TypeError,ValueError):
                midpoint = "."

            values = []
            for v in self._table.column_values(column)[1:]:
                if is_null(v):
                    continue
                try:
                    values.append(float(v))
                except ValueError:
                    continue

            if len(values) == 0:
                window_mean = "."
            elif log:
                window_mean = numpy.log2(numpy.mean(2.0 ** numpy.array(values)))
            else:
                window_mean = numpy.mean(values)

            summed.add_row([self.name(column),str(midpoint),str(window_mean)])

        filename = _summary_base(filename)
        return summed.save(filename="%s_summed.txt" % filename,gz=False)


def _summary_base(filename):
    for ext in (".gz",".txt"):
        if filename.endswith(ext):
            filename = filename[:-len(ext)]
    return filename
