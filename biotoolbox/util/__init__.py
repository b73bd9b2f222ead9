#!/usr/bin/env python
"""Miscellaneous, general utilities useful for scripting

Package overview
================

    ======================================   ===========================================================================
    **Subpackages**                          **Contents**
    --------------------------------------   ---------------------------------------------------------------------------
    :py:obj:`~biotoolbox.util.io`             Wrappers for file I/O and output streams
    :py:obj:`~biotoolbox.util.scriptlib`      Tools for writing command-line scripts that use :data:`biotoolbox`
    :py:obj:`~biotoolbox.util.services`       Exceptions, warnings, and warning filters
    --------------------------------------   ---------------------------------------------------------------------------
    **Package modules**                      **Contents**
    --------------------------------------   ---------------------------------------------------------------------------
    :py:mod:`~biotoolbox.util.config`         Configuration read from a `YAML`_ file
    ======================================   ===========================================================================

"""
