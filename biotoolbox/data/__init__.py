#!/usr/bin/env python
"""The |Data| table and its supporting structures.

Package overview
================

    =============================================  ==================================================================
    **Submodule**                                  **Description**
    ---------------------------------------------  ------------------------------------------------------------------
    :py:mod:`~biotoolbox.data.core`                 |Data|, a table of features with file and column metadata

    :py:mod:`~biotoolbox.data.table`                Row-major storage of cells, with the header in row 0

    :py:mod:`~biotoolbox.data.metadata`             Per-column metadata dictionaries

    :py:mod:`~biotoolbox.data.columns`              Identification of columns by name and role

    :py:mod:`~biotoolbox.data.feature`              Views of single rows, and iteration over them

    :py:mod:`~biotoolbox.data.sorting`              Numeric, lexical, and genomic sorting of rows

    :py:mod:`~biotoolbox.data.partition`            Splitting tables for parallel work and merging the results
    =============================================  ==================================================================
"""
