#!/usr/bin/env python
"""Row-ordering algorithms used by :meth:`Data.sort_data <biotoolbox.data.core.Data.sort_data>`
and :meth:`Data.gsort_data <biotoolbox.data.core.Data.gsort_data>`.

Both algorithms map each row to a unique sort key and then rebuild the row
list in key order. When two rows share a key, the later row's key is bumped
until it is unique:

    =============================   ==========================================
    **Sort**                        **Bump applied to duplicate key**
    -----------------------------   ------------------------------------------
    numeric column sort             add `1e-8`, repeatedly
    lexical column sort             append `"001"`, `"002"`, ... to the value
    genomic sort (start position)   add `0.001`, repeatedly
    =============================   ==========================================

Because bumps depend on the order in which rows are scanned, rows with equal
keys usually, but not always, keep their relative order. A bumped lexical key
can also collide with, or sort past, a genuine value (e.g. `"a001"`).
These are known approximations, not a guaranteed stable sort.
"""
import re
import math
from biotoolbox.data.table import is_null

NUMERIC_PATTERN = re.compile(r"^-?\d+\.?\d*$")
"""Values matching this pattern are sorted numerically"""

LETTER_PATTERN  = re.compile(r"[a-z]",re.I)

NUMERIC_CHROMOSOME_PATTERN = re.compile(r"^(?:chr)?(\d+)$")
"""Chromosomes matching this pattern (e.g. `chr2` or `2`, but not `2-micron`)
sort numerically, ahead of all others"""

NUMERIC_EPSILON = 1e-8
POSITION_EPSILON = 0.001


def sort_method(values):
    """Decide how a column should be sorted, by examining its first non-null value

    Parameters
    ----------
    values : list
        Column values, without header

    Returns
    -------
    str
        `"numeric"` or `"lexical"`
    """
    for v in values:
        if not is_null(v):
            v = str(v)
            if LETTER_PATTERN.search(v):
                return "lexical"
            if NUMERIC_PATTERN.match(v):
                return "numeric"
            return "lexical"

    return "lexical"

def parse_direction(direction):
    """Return `"i"` or `"d"` from a direction word such as `"increasing"`
    or `"D"`, or `None` if unrecognized"""
    d = str(direction)[:1].lower()
    return d if d in ("i","d") else None

def _as_float(value):
    try:
        return float(value)
    except (TypeError,ValueError):
        return 0.0

def _bump(value,epsilon,seen):
    while value in seen:
        bumped = value + epsilon
        if bumped == value:
            # epsilon below float resolution at this magnitude
            bumped = math.nextafter(value,math.inf)
        value = bumped
    return value

def sort_rows(rows,column,direction="i"):
    """Order rows by the values in one column

    Parameters
    ----------
    rows : list of list
        Data rows (no header)

    column : int
        Index of column to sort by

    direction : str, optional
        `"i"` for increasing (default), `"d"` for decreasing

    Returns
    -------
    list of list
        Rows, reordered

    str
        Sort method used: `"numeric"` or `"lexical"`
    """
    method = sort_method([X[column] for X in rows])
    keyed = {}
    if method == "numeric":
        for row in rows:
            keyed[_bump(_as_float(row[column]),NUMERIC_EPSILON,keyed)] = row
    else:
        for row in rows:
            value = str(row[column])
            lookup = value
            n = 1
            while lookup in keyed:
                lookup = "%s%03d" % (value,n)
                n += 1
            keyed[lookup] = row

    order = sorted(keyed,reverse=(direction == "d"))
    return [keyed[X] for X in order], method

def gsort_rows(rows,chrom_column,start_column):
    """Order rows by chromosome and then start position

    Chromosomes named by a number (with or without a `chr` prefix) come first,
    in numeric order. All other chromosomes follow in lexical order. Within a
    chromosome, rows are ordered by increasing start position.

    Parameters
    ----------
    rows : list of list
        Data rows (no header)

    chrom_column : int
        Index of chromosome column

    start_column : int
        Index of start column

    Returns
    -------
    list of list
        Rows, reordered
    """
    numeric = {}
    named   = {}
    for row in rows:
        chrom = str(row[chrom_column])
        m = NUMERIC_CHROMOSOME_PATTERN.match(chrom)
        if m is not None:
            bucket = numeric.setdefault(int(m.group(1)),{})
        else:
            bucket = named.setdefault(chrom,{})
        bucket[_bump(_as_float(row[start_column]),POSITION_EPSILON,bucket)] = row

    ltmp = []
    for buckets in (numeric,named):
        for chrom in sorted(buckets):
            bucket = buckets[chrom]
            ltmp.extend(bucket[X] for X in sorted(bucket))

    return ltmp
