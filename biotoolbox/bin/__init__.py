#!/usr/bin/env python
"""Command-line scripts

    =============================================  ==================================================================
    **Script**                                     **Description**
    ---------------------------------------------  ------------------------------------------------------------------
    :py:mod:`~biotoolbox.bin.useq2bigfile`          Convert `USeq`_ archives to `BigWig`_ or `BigBed`_ files
    =============================================  ==================================================================
"""
