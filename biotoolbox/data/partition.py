#!/usr/bin/env python
"""Split |Data| tables into shards for parallel processing, and merge the
results back together.

A table of `R` data rows is split into `N` contiguous parts. Parts `1` to
`N-1` each hold ``R // N`` rows; part `N` holds the remainder. Each worker
process receives its own copy of the table, keeps only its part (see
:meth:`Data.splice_data <biotoolbox.data.core.Data.splice_data>`),
processes it, and writes it to a child file. The parent then concatenates
the child files in part order (see
:meth:`Data.reload_children <biotoolbox.data.core.Data.reload_children>`).

Workers never share database handles. A spliced table drops its cached
handle, and tables are pickled without one.

Examples
--------
Score every row of a table in four processes::

    >>> def add_length(data):
    >>>     col = data.add_column("Length")
    >>>     for feature in data.row_stream():
    >>>         feature.value(col,feature.length)
    >>>
    >>> run_in_parts(data,add_length,4,"/tmp/genes_part")
"""
import os
import re
import numbers
import functools
import multiprocessing

from biotoolbox.readers.table_file import read_table_file, split_filename, fix_extension
from biotoolbox.util.io.openers import NullWriter
from biotoolbox.util.services.exceptions import MergeInconsistencyError


def part_bounds(last_row,part,total_parts):
    """Return the first and last data rows (1-based, inclusive) of one part

    Parameters
    ----------
    last_row : int
        Number of data rows in table

    part : int
        Ordinal of part, from 1 to `total_parts`

    total_parts : int
        Number of parts

    Returns
    -------
    int
        First row of part

    int
        Last row of part. Less than the first row if the part is empty.

    Raises
    ------
    ValueError
        if `part` or `total_parts` are not positive integers, or `part` exceeds `total_parts`
    """
    if not (isinstance(part,numbers.Integral) and isinstance(total_parts,numbers.Integral)) \
       or part < 1 or total_parts < 1 or part > total_parts:
        raise ValueError("Part must be between 1 and total number of parts. Got part %s of %s." % (part,total_parts))

    length = last_row // total_parts
    first  = (part - 1) * length + 1
    last   = last_row if part == total_parts else part * length
    return first, last

def read_children(files,printer=None):
    """Read child files written by workers, checking that they can be merged

    All files are read before anything is returned, so a failure leaves
    callers' state untouched.

    Parameters
    ----------
    files : list of str
        Child files, in part order

    printer : file-like, optional
        Logger implementing a ``write()`` method (Default: |NullWriter|)

    Returns
    -------
    |TableFile|
        Contents of first file, whose table holds the rows of all files

    Raises
    ------
    |MergeInconsistencyError|
        if any child file has a different number of columns than the first
    """
    printer = NullWriter() if printer is None else printer
    first = read_table_file(files[0])
    rows  = first.table.data_rows()
    for filename in files[1:]:
        child = read_table_file(filename)
        if child.number_columns != first.number_columns:
            raise MergeInconsistencyError("Child file '%s' has %s columns, but '%s' has %s." % (filename,child.number_columns,
                                                                                             files[0],first.number_columns))
        rows.extend(child.table.data_rows())

    first.table.set_data_rows(rows)
    printer.write("Merged %s rows from %s child files." % (len(rows),len(files)))
    return first


#===============================================================================
# INDEX: fork-join helper
#===============================================================================

_gff_shard_extensions = { 3 : ".gff3", 2.5 : ".gtf" }

def shard_filename(data,prefix,part):
    """Name of the child file written for one part of `data`

    Child files keep the format extension of the file `data` was loaded
    from, so that `BED`_ and GFF tables are still recognized as such when
    they are merged.

    Parameters
    ----------
    data : |Data|

    prefix : str
        Path prefix for child files

    part : int
        Part number

    Returns
    -------
    str
        ``prefix.<part>`` followed by an uncompressed extension
    """
    ext = "" if data.filename is None else split_filename(data.filename)[2]
    ext = re.sub(r"\.(?:gz|bz2)$","",ext,flags=re.I)
    if ext in ("",".txt"):
        if data.gff:
            ext = _gff_shard_extensions.get(data.gff,".gff")
        elif data.bed:
            ext = ".bed"
    return fix_extension("%s.%s%s" % (prefix,part,ext),data.gff,data.bed,gz=False)

def _remove_shards(data,prefix,parts):
    for part in range(1,parts+1):
        name = shard_filename(data,prefix,part)
        for filename in set([name,fix_extension(name)]):
            if os.path.exists(filename):
                os.remove(filename)

def _part_worker(part,data=None,func=None,total_parts=None,prefix=None):
    filename = shard_filename(data,prefix,part)
    data.splice_data(part,total_parts)
    func(data)
    return data.save(filename=filename,gz=False)

def run_in_parts(data,func,parts,prefix,processes=None):
    """Apply `func` to `parts` shards of `data` in worker processes, then merge
    the results back into `data`

    Parameters
    ----------
    data : |Data|
        Table to process. Replaced in place by the merged result.

    func : callable
        Function taking a spliced |Data| and modifying it in place. Must be
        picklable, i.e. defined at the top level of a module.

    parts : int
        Number of shards

    prefix : str
        Path prefix for child files, which are named by :func:`shard_filename`
        and deleted after merging

    processes : int, optional
        Number of worker processes (Default: `parts`)

    Returns
    -------
    int
        :attr:`~biotoolbox.data.core.Data.last_row` of merged table

    Raises
    ------
    Exception
        Any exception raised by `func` in a worker. The pool is terminated and
        child files already written are removed.
    """
    worker = functools.partial(_part_worker,data=data,func=func,total_parts=parts,prefix=prefix)
    pool = multiprocessing.Pool(processes=processes or parts)
    try:
        filenames = pool.map(worker,range(1,parts+1),1)
    except Exception:
        pool.terminate()
        pool.join()
        _remove_shards(data,prefix,parts)
        raise

    pool.close()
    pool.join()
    return data.reload_children(*filenames)
