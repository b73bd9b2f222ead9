#!/usr/bin/env python
"""Sources of genomic features and chromosome sizes, and tools to make new
feature and window lists from them.

    =============================================  ==================================================================
    **Submodule**                                  **Description**
    ---------------------------------------------  ------------------------------------------------------------------
    :py:mod:`~biotoolbox.genomics.sources`          |FeatureLister| and |ChromosomeSizeSource| implementations

    :py:mod:`~biotoolbox.genomics.lists`            New feature lists and genome window lists
    =============================================  ==================================================================
"""
