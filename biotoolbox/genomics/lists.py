#!/usr/bin/env python
"""Populate empty |Data| tables with new lists of features or genomic windows.

:func:`get_new_feature_list`
    One row per annotated feature of the requested types, collected from a
    |FeatureLister|

:func:`get_new_genome_list`
    One row per window tiling every chromosome reported by a
    |ChromosomeSizeSource|

These back :class:`~biotoolbox.data.core.Data` when it is created with
a `database` and a `feature`.
"""
import re

FEATURE_LIST_COLUMNS = ["Primary_ID","Name","Type","Chromosome","Start","Stop","Strand"]
GENOME_LIST_COLUMNS  = ["Chromosome","Start","Stop"]


def _require_empty(data):
    if data.number_columns > 0:
        raise ValueError("New lists can only be generated in an empty table.")

def get_new_feature_list(data,lister,features,printer=None):
    """Add one row per feature of the requested types

    Parameters
    ----------
    data : |Data|
        Empty table to fill

    lister : |FeatureLister|
        Source of features

    features : str or list of str
        Feature types, e.g. ``"gene"`` or ``["mRNA","ncRNA:SGD"]``

    Returns
    -------
    int
        Number of features added

    Raises
    ------
    ValueError
        if `data` already has columns
    """
    _require_empty(data)
    for name in FEATURE_LIST_COLUMNS:
        data.add_column(name)

    types = [features] if isinstance(features,str) else list(features)
    count = 0
    for feature in lister.features(types):
        data.add_row([feature["id"] or ".",
                      feature["name"] or ".",
                      feature["type"],
                      feature["chromosome"],
                      str(feature["start"]),
                      str(feature["stop"]),
                      feature["strand"]])
        count += 1

    data.feature = ",".join(types)
    if printer is not None:
        printer.write("Found %s features of type %s." % (count,data.feature))
    return count

def get_new_genome_list(data,sizes,win,step,exclude=None,printer=None):
    """Add one row per window across the genome

    Windows are 1-based and inclusive. On a chromosome of length `L`, windows
    begin at `1, 1+step, 1+2*step, ...` up to `L`, and each ends at
    ``min(start + win - 1, L)``.

    Parameters
    ----------
    data : |Data|
        Empty table to fill

    sizes : |ChromosomeSizeSource| or dict
        Chromosome names and lengths

    win : int
        Window size

    step : int
        Distance between window starts

    exclude : list of str, optional
        Regular expressions. Chromosomes whose whole name matches any are skipped.

    Returns
    -------
    int
        Number of windows added

    Raises
    ------
    ValueError
        if `data` already has columns, or `win` or `step` are not positive
    """
    _require_empty(data)
    win, step = int(win), int(step)
    if win < 1 or step < 1:
        raise ValueError("Window and step sizes must be positive. Got %s and %s." % (win,step))

    if hasattr(sizes,"chromosome_sizes"):
        sizes = sizes.chromosome_sizes()

    excluded = [re.compile(X) for X in (exclude or [])]

    for name in GENOME_LIST_COLUMNS:
        data.add_column(name)
    data.metadata(1,"win",win)
    data.metadata(1,"step",step)

    count = 0
    for chrom, length in sizes.items():
        if any(X.fullmatch(chrom) for X in excluded):
            continue
        for start in range(1,length+1,step):
            data.add_row([chrom,str(start),str(min(start + win - 1,length))])
            count += 1

    data.feature = "genome"
    if printer is not None:
        printer.write("Generated %s windows of %s bp, stepping %s bp." % (count,win,step))
    return count
