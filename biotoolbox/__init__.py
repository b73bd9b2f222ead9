#!/usr/bin/env python
"""Welcome to biotoolbox!

This package contains utilities for working with tables of genomic features
and the genome-wide data collected for them. To this end, this package provides:

  #. An in-memory table, |Data|, that loads and saves tab-delimited text,
     `BED`_, and `GFF`_ files with their metadata, and that can be sorted,
     split into parts for parallel work, and merged again (see |data|)

  #. Readers for the file formats that back those tables (see |readers|)

  #. Narrow interfaces to annotation databases and genome files, used to
     build new lists of features or genomic windows (see |genomics|)

  #. Command-line scripts and tools to facilitate writing them (see |bin|
     and |scriptlib|)


Package overview
----------------
biotoolbox is divided into the following subpackages:

    ==============    =========================================================
    Package           Contents
    --------------    ---------------------------------------------------------
    |bin|             Command-line scripts
    |data|            The |Data| table, its columns, rows, sorting, and splitting
    |genomics|        Feature and chromosome size sources, and new list generation
    |readers|         Parsers and writers for table, BED, and GFF files
    |util|            Utilities (e.g. configuration, exceptions, argument parsers)
    |test|            Unit and functional tests
    ==============    =========================================================

"""
__version__ = "1.0.0"

from biotoolbox.data.core import Data
from biotoolbox.util.io.openers import read_bt_table
from biotoolbox.util.services.exceptions import formatwarning
