#!/usr/bin/env python
"""Parsers and writers for file formats that back |Data| tables.

    =============================================  ==================================================================
    **Submodule**                                  **Description**
    ---------------------------------------------  ------------------------------------------------------------------
    :py:mod:`~biotoolbox.readers.table_file`        Tab-delimited text, `BED`_, and `GFF`_ files with metadata

    :py:mod:`~biotoolbox.readers.gff_tokens`        Parsing and escaping of `GFF3`_ and `GTF2`_ attribute columns
    =============================================  ==================================================================
"""
