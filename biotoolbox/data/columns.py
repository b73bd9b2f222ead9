#!/usr/bin/env python
"""Locate columns of a |Data| table by name.

Genomic tables name the same thing many ways: a chromosome column may be
called `Chromosome`, `chrom`, `seq_id`, or `refseq`. This module defines the
recognized alias sets for each column role, and functions that search a list
of column names for them.

    ==============  ===============================================================
    **Role**        **Recognized names** (case-insensitive, whole name)
    --------------  ---------------------------------------------------------------
    chromosome      chr, chrom, chromo, chromosome, seq_id, seqid, seqname,
                    sequence, refseq, reference, ref
    start           start, begin, pos, position, txstart, chromstart, start_position
    stop            stop, end, txend, chromend, stop_position, end_position
    strand          strand
    name            name, gene_name, transcript_name, alias, display_name
    type            type, class, primary_tag, feature_type, method
    id              primary_id, id
    ==============  ===============================================================
"""
import re
from biotoolbox.util.services.exceptions import UnresolvableColumnError

COLUMN_ALIASES = {
    "chromosome" : ("chr","chrom","chromo","chromosome","seq_id","seqid","seqname",
                    "sequence","refseq","reference","ref"),
    "start"      : ("start","begin","pos","position","txstart","chromstart","start_position"),
    "stop"       : ("stop","end","txend","chromend","stop_position","end_position"),
    "strand"     : ("strand",),
    "name"       : ("name","gene_name","transcript_name","alias","display_name"),
    "type"       : ("type","class","primary_tag","feature_type","method"),
    "id"         : ("primary_id","id"),
}
"""Column names recognized for each role"""

_ROLE_PATTERNS = {
    K : re.compile(r"^(?:%s)$" % "|".join(V),re.I) for K, V in COLUMN_ALIASES.items()
}


def find_column(names,pattern):
    """Find the first column whose name matches `pattern`

    Parameters
    ----------
    names : list of str
        Column names, in index order

    pattern : str
        Regular expression, searched case-insensitively anywhere in the name

    Returns
    -------
    int or None
        Index of first matching column
    """
    regex = re.compile(pattern,re.I)
    for i, name in enumerate(names):
        if regex.search(str(name)):
            return i

    return None

def role_column(names,role):
    """Find the first column whose whole name is an alias for `role`

    Parameters
    ----------
    names : list of str
        Column names, in index order

    role : str
        A key of :data:`COLUMN_ALIASES`

    Returns
    -------
    int or None
    """
    pat = _ROLE_PATTERNS[role]
    for i, name in enumerate(names):
        if pat.match(str(name)):
            return i

    return None

def require_column(names,role):
    """Like :func:`role_column`, but raise if the role cannot be resolved

    Raises
    ------
    |UnresolvableColumnError|
        if no column name matches an alias of `role`
    """
    index = role_column(names,role)
    if index is None:
        raise UnresolvableColumnError(role)
    return index
