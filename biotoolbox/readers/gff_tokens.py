#!/usr/bin/env python
"""Functions for escaping, unescaping, and parsing tokens from the ninth
column of `GTF2`_ and `GFF3`_ files.

The same percent-escaping is used for values of column metadata in
|Data| table files (see :mod:`biotoolbox.readers.table_file`), where `;` and
`=` separate keys and values.

Important methods
-----------------
:py:func:`escape_GFF3`, :py:func:`unescape_GFF3`
    Percent-encode or decode reserved characters

:py:func:`parse_GFF3_tokens`
    Parse `GFF3`_ column 9 tokens into a dictionary of key-value pairs

:py:func:`parse_GTF2_tokens`
    Parse `GTF2`_ column 9 tokens into a dictionary of key-value pairs

See also
--------
  - `The Sequence Ontology GFF3 specification <http://www.sequenceontology.org/gff3.shtml>`_
  - `The Brent lab GTF2.2 specification <http://mblab.wustl.edu/GTF22.html>`_
"""
import re
import shlex
import warnings
from biotoolbox.util.services.exceptions import FileFormatWarning

# Parent, Alias, Note, Dbxref and Ontology_term may hold several values.
# SGD writes 'dbxref' for 'Dbxref'
_GFF3_DEFAULT_LISTS = ("Parent","Alias","Note","Dbxref","Ontology_term","dbxref")

# control characters, tab, newline, CR, and ; , = & %
_GFF3_reserved = re.compile(r"[\x00-\x1f\x7f-\x9f;,=&%]")
_escape_code   = re.compile(r"%([0-9A-Fa-f]{2})")


#===============================================================================
# INDEX: escaping
#===============================================================================

def escape_GFF3(inp):
    """Percent-encode characters reserved by the `GFF3`_ specification:
    control characters, semicolons, commas, equals signs, ampersands,
    and the percent sign itself

    Parameters
    ----------
    inp : str

    Returns
    -------
    str
        Escaped output

    See also
    --------
    unescape_GFF3
    """
    return _GFF3_reserved.sub(lambda m: "%%%02X" % ord(m.group(0)),str(inp))

def unescape_GFF3(inp):
    """Decode percent-encoded characters, e.g. `'%3B'` to `';'`

    Parameters
    ----------
    inp : str

    Returns
    -------
    str
        Unescaped output

    See also
    --------
    escape_GFF3
    """
    return _escape_code.sub(lambda m: chr(int(m.group(1),16)),inp)


#===============================================================================
# INDEX: attribute parsing
#===============================================================================

def parse_GFF3_tokens(inp,list_types=_GFF3_DEFAULT_LISTS):
    """Parse tokens in the final column of a `GFF3`_ file into a dictionary
    of attributes. Values of attributes listed in `list_types` are returned
    as lists. All keys and values are unescaped.

    Examples
    --------
        >>> parse_GFF3_tokens("ID=gene01;Name=ABC1;Alias=a,b")
        {'ID': 'gene01', 'Name': 'ABC1', 'Alias': ['a', 'b']}

    Parameters
    ----------
    inp : str
        Ninth column of `GFF3`_ entry

    list_types : tuple, optional
        Names of attributes that should be returned as lists

    Returns
    -------
    dict : key-value pairs
    """
    d = {}
    for item in inp.strip("\n").strip(";").split(";"):
        item = item.strip(" ")
        if len(item) == 0:
            continue
        key, _, val = item.partition("=")
        key = unescape_GFF3(key.strip(" "))
        if key in list_types:
            val = [unescape_GFF3(X) for X in val.strip(" ").split(",")]
        else:
            val = unescape_GFF3(val.strip(" "))

        if key in d:
            warnings.warn("Found duplicate attribute key '%s' in GFF3 line. Catenating values:\n    %s" % (key,inp),
                          FileFormatWarning)
            if isinstance(val,list):
                val = d[key] + val
            else:
                val = "%s,%s" % (d[key],val)
        d[key] = val

    return d

def parse_GTF2_tokens(inp):
    """Parse tokens in the final column of a `GTF2`_ file into a dictionary
    of attributes. Values of duplicate keys are catenated with commas.

    Examples
    --------
        >>> parse_GTF2_tokens('gene_id "mygene"; transcript_id "mytranscript";')
        {'gene_id': 'mygene', 'transcript_id': 'mytranscript'}

    Parameters
    ----------
    inp : str
        Ninth column of `GTF2`_ entry

    Returns
    -------
    dict : key-value pairs
    """
    d = {}
    items = shlex.split(inp.strip("\n"))
    for key, val in zip(items[0::2],items[1::2]):
        key = unescape_GFF3(key)
        val = unescape_GFF3(val.rstrip(";"))
        if key in d:
            warnings.warn("Found duplicate attribute key '%s' in GTF2 line. Catenating values:\n    %s" % (key,inp),
                          FileFormatWarning)
            val = "%s,%s" % (d[key],val)
        d[key] = val

    return d

def parse_attributes(inp,gff_version=3):
    """Parse column 9 of a GFF file, choosing the grammar from `gff_version`.
    Versions below 3 (including `GTF2`_, version 2.5) use `GTF2`_ tokens."""
    if float(gff_version) >= 3:
        return parse_GFF3_tokens(inp)
    return parse_GTF2_tokens(inp)
