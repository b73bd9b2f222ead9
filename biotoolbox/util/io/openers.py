#!/usr/bin/env python
"""Various wrappers and utilities for opening, closing, and writing files.

Important methods
-----------------
:py:func:`opener`
    Guesses whether a file is bzipped, gzipped, or uncompressed based upon
    file extension, opens it appropriately in text mode, and returns a
    file-like object.

:py:func:`read_bt_table`
    Open a table saved by :class:`~biotoolbox.data.core.Data` into a
    :class:`pandas.DataFrame`.

:py:func:`NullWriter`
    Writes to the system's null location.
"""
import os
import re
import gzip
import bz2
import pandas as pd
from biotoolbox.util.io.filters import AbstractWriter


class NullWriter(AbstractWriter):
    """Writes to system-dependent null location.
    On Unix-like systems & OSX, this is typically /dev/null. On Windows, simply "nul"
    """

    def __init__(self):
        self.stream = open(os.devnull,"w")

    def filter(self,stream):
        return stream

    def __getstate__(self):
        return {}

    def __setstate__(self,state):
        self.__init__()

    def __repr__(self):
        return "NullWriter()"

    def __str__(self):
        return self.__repr__()


def opener(filename,mode="r",**kwargs):
    """Open a file, detecting whether it is compressed or not, based upon
    its file extension. Compressed files are opened in text mode unless
    `mode` asks for bytes.

       +----------------+------------------+
       | File ends with | Presumed to be   |
       +================+==================+
       | gz             |    gzipped       |
       +----------------+------------------+
       | bz2            |    bzipped       |
       +----------------+------------------+
       | anything else  |    uncompressed  |
       +----------------+------------------+

    Parameters
    ----------
    filename : str
        Name of file to open

    mode : str
        Mode in which to open file (e.g. "r", "a", "w", with or without "b")

    **kwargs
        Other parameters to pass to appropriate file opener
    """
    if filename.endswith(".gz"):
        call_func = gzip.open
    elif filename.endswith(".bz2"):
        call_func = bz2.open
    else:
        return open(filename,mode,**kwargs)

    if "b" not in mode and "t" not in mode:
        mode += "t"
    return call_func(filename,mode,**kwargs)

def read_bt_table(filename,**kwargs):
    """Open a table saved by :meth:`Data.save <biotoolbox.data.core.Data.save>`,
    passing default arguments to :func:`pandas.read_table`:

        ==========   =======
        Key          Value
        ----------   -------
        sep          `"\\t"`
        comment      `"#"`
        index_col    `None`
        header       `0`
        na_values    `"."`
        ==========   =======

    Parameters
    ----------
    filename : str
        Name of file. Can be gzipped or bzipped.

    kwargs : keyword arguments
        Other keyword arguments to pass to :func:`pandas.read_table`.
        Will override defaults.

    Returns
    -------
    :class:`pandas.DataFrame`
    """
    args = { "sep"       : "\t",
             "comment"   : "#",
             "index_col" : None,
             "header"    : 0,
             "na_values" : ".",
        }
    args.update(kwargs)
    return pd.read_table(filename,**args)

def get_short_name(inpt,separator=os.path.sep,terminator=""):
    """Gives the basename of a filename or module name passed as a string.
    If the string doesn't match the pattern specified by the separator
    and terminator, it is returned unchanged.

    Examples
    --------
    >>> get_short_name("test")
    'test'

    >>> get_short_name("/home/jdoe/test.py",terminator=".py")
    'test'

    >>> get_short_name("biotoolbox.bin.useq2bigfile",separator=r"\\.",terminator="")
    'useq2bigfile'

    Parameters
    ----------
    inpt : str
        Input

    separator : str
        Path separator (default: :obj:`os.path.sep`)

    terminator : str
        File terminator (default: "")

    Returns
    -------
    str
    """
    tlen = len(terminator)
    if tlen > 0 and inpt[-tlen:] == terminator:
        inpt = inpt[:-tlen]

    pat = r"([^%s]+)+$" % separator
    try:
        return re.search(pat,inpt).group(1)
    except AttributeError:
        return inpt
