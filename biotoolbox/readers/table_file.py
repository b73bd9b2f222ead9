#!/usr/bin/env python
"""Read and write tab-delimited table files used by |Data|.

File layout
-----------
A table file begins with optional comment lines, followed by a header line of
column names and then one line per data row. Cells are separated by tabs.
Some comment lines carry metadata::

    # Program useq2bigfile
    # Database hg19
    # Feature gene
    # Column_3 name=Score;dataset=H3K4me3;log2=1
    # any other comment, kept verbatim
    Chromosome	Start	Stop	Score
    chr1	100	200	0.5

    ======================================   ======================================
    **Comment line**                         **Meaning**
    --------------------------------------   --------------------------------------
    ``# Program``, ``# Database``,           Table-wide metadata. The forms
    ``# Feature``                            ``# Program=value`` are also accepted

    ``# Column_<i> key=value;key=value``     Metadata of column `i`. Values are
                                             percent-escaped as in `GFF3`_

    ``##gff-version <n>``                    Marks a GFF file. Kept as a comment

    anything else                            Comment, preserved verbatim
    ======================================   ======================================

`BED`_-like files (``.bed``, ``.bedgraph``, ``.narrowPeak``...) and GFF
files (``.gff``, ``.gff3``, ``.gtf``) have no header line. Their columns receive
standard names instead, and ``track`` or ``browser`` lines are kept as comments.

In files with a header line, comment lines are only recognized before the
header. Afterwards, a line beginning with `#` is a data row.

Files ending in ``.gz`` or ``.bz2`` are read and written compressed.
"""
import os
import re

from biotoolbox.data.table import DataTable, PLACEHOLDER
from biotoolbox.data.metadata import ColumnMetadata
from biotoolbox.data.columns import role_column
from biotoolbox.readers.gff_tokens import escape_GFF3, unescape_GFF3
from biotoolbox.util.io.openers import opener, NullWriter
from biotoolbox.util.services.exceptions import FileFormatWarning, warn

BED_COLUMN_NAMES = ["Chromosome","Start","End","Name","Score","Strand",
                    "thickStart","thickEnd","itemRGB","blockCount","blockSizes","blockStarts"]

BEDGRAPH_COLUMN_NAMES = ["Chromosome","Start","End","Score"]

PEAK_COLUMN_NAMES = ["Chromosome","Start","End","Name","Score","Strand",
                     "signalValue","pValue","qValue","peak"]

GFF_COLUMN_NAMES = ["Chromosome","Source","Type","Start","Stop","Score","Strand","Phase","Group"]

GENERAL_KEYS = ("program","database","feature")

_bed_extensions = {
    ".bed"        : BED_COLUMN_NAMES,
    ".bedgraph"   : BEDGRAPH_COLUMN_NAMES,
    ".bdg"        : BEDGRAPH_COLUMN_NAMES,
    ".narrowpeak" : PEAK_COLUMN_NAMES,
    ".broadpeak"  : PEAK_COLUMN_NAMES,
}
_gff_extensions = {
    ".gff"  : 2,
    ".gff3" : 3,
    ".gtf"  : 2.5,
}

_compression_pattern = re.compile(r"\.(?:gz|bz2)$",re.I)
_extension_pattern   = re.compile(r"(\.(?:txt|tsv|bed|bedgraph|bdg|narrowpeak|broadpeak|gff3?|gtf|sgr|cdt))?(\.(?:gz|bz2))?$",re.I)
_general_pattern     = re.compile(r"^# ?(Program|Database|Feature)(?: +|=)(.*)$",re.I)
_column_pattern      = re.compile(r"^# ?Column_(\d+) +(.*)$")
_gff_version_pattern = re.compile(r"^##gff-version\s+(\S+)")


#===============================================================================
# INDEX: filenames
#===============================================================================

def split_filename(filename):
    """Split a filename into directory, base name, and recognized extension

    Examples
    --------
    >>> split_filename("/data/genes.txt.gz")
    ('/data', 'genes', '.txt.gz')

    Parameters
    ----------
    filename : str

    Returns
    -------
    str
        Directory, or empty string

    str
        File name without directory or extension

    str
        Extension, including any compression suffix
    """
    path, name = os.path.split(filename)
    m = _extension_pattern.search(name)
    extension = m.group(0)
    return path, name[:len(name)-len(extension)], extension

def _format_extension(extension):
    """Return lower-cased extension with compression suffix removed"""
    return _compression_pattern.sub("",extension).lower()

def _number_if_possible(value):
    try:
        f = float(value)
    except ValueError:
        return value
    return int(f) if f == int(f) else f


#===============================================================================
# INDEX: parsed-file container
#===============================================================================

class TableFile(object):
    """Everything read from, or to be written to, a table file

    Attributes
    ----------
    table : |DataTable|
        Header and rows

    column_metadata : |ColumnMetadata|
        Metadata for each column

    comments : list of str
        Comment lines, without leading `#`, in file order

    program, database, feature : str or None
        Table-wide metadata

    gff : float
        GFF version, or 0 if not a GFF file

    bed : int
        Number of `BED`_ columns, or 0 if not a `BED`_ file

    headers : bool
        Whether the file has (or should be written with) a header line

    filename : str or None
        File name
    """

    def __init__(self,table=None,column_metadata=None,comments=None,program=None,
                 database=None,feature=None,gff=0,bed=0,headers=True,filename=None):
        self.table           = DataTable() if table is None else table
        self.column_metadata = ColumnMetadata() if column_metadata is None else column_metadata
        self.comments        = [] if comments is None else comments
        self.program         = program
        self.database        = database
        self.feature         = feature
        self.gff             = gff
        self.bed             = bed
        self.headers         = headers
        self.filename        = filename

    @property
    def number_columns(self):
        return self.table.number_columns


#===============================================================================
# INDEX: format classification
#===============================================================================

def classify_format(names,gff=0,bed=0):
    """Check whether a table still fits the GFF or `BED`_ layout it was
    read from, and return updated format markers

    Parameters
    ----------
    names : list of str
        Column names

    gff : float
        Current GFF version, or 0

    bed : int
        Current BED column count, or 0

    Returns
    -------
    float
        GFF version, or 0 if the table is no longer a GFF table

    int
        BED column count, or 0 if the table is no longer a BED table
    """
    if gff:
        if not (len(names) == 9
                and role_column(names[0:1],"chromosome") == 0
                and role_column(names[3:4],"start") == 0
                and role_column(names[4:5],"stop") == 0):
            gff = 0

    if bed:
        if 3 <= len(names) <= 12 \
           and role_column(names[0:1],"chromosome") == 0 \
           and role_column(names[1:2],"start") == 0 \
           and role_column(names[2:3],"stop") == 0:
            bed = len(names)
        else:
            bed = 0

    return gff, bed


#===============================================================================
# INDEX: reading
#===============================================================================

def _parse_column_metadata(text):
    md = {}
    for item in text.strip().strip(";").split(";"):
        if "=" not in item:
            continue
        key, _, val = item.partition("=")
        md[unescape_GFF3(key.strip())] = unescape_GFF3(val.strip())
    return md

def _fit_row(items,number_columns,filename,line_num):
    if len(items) < number_columns:
        warn("Padding row at line %s of '%s' from %s to %s cells" % (line_num,filename,len(items),number_columns),
                      FileFormatWarning)
        items.extend([PLACEHOLDER] * (number_columns - len(items)))
    elif len(items) > number_columns:
        warn("Truncating row at line %s of '%s' from %s to %s cells" % (line_num,filename,len(items),number_columns),
                      FileFormatWarning)
        del items[number_columns:]
    return items

def read_table_file(filename,printer=None):
    """Read a table file

    Parameters
    ----------
    filename : str
        Name of file. May be gzipped or bzipped.

    printer : file-like, optional
        Logger implementing a ``write()`` method (Default: |NullWriter|)

    Returns
    -------
    |TableFile|
    """
    printer = NullWriter() if printer is None else printer
    ext = _format_extension(split_filename(filename)[2])

    result = TableFile(filename=filename)
    column_md = {}
    bed_names = _bed_extensions.get(ext)
    if ext in _gff_extensions:
        result.gff = _gff_extensions[ext]
    headerless = bed_names is not None or result.gff > 0
    result.headers = not headerless

    names = None
    rows  = []
    with opener(filename) as fh:
        for line_num, line in enumerate(fh,1):
            line = line.rstrip("\r\n")
            if len(line.strip()) == 0:
                continue

            if line.startswith("#") and (names is None or headerless):
                m = _general_pattern.match(line)
                if m is not None:
                    setattr(result,m.group(1).lower(),m.group(2).strip())
                    continue
                m = _column_pattern.match(line)
                if m is not None:
                    column_md[int(m.group(1))] = _parse_column_metadata(m.group(2))
                    continue
                m = _gff_version_pattern.match(line)
                if m is not None:
                    result.gff = _number_if_possible(m.group(1))
                result.comments.append(line[1:])
                continue

            if headerless and (line.startswith("track") or line.startswith("browser")):
                result.comments.append(line)
                continue

            items = [X if X.strip() != "" else PLACEHOLDER for X in line.split("\t")]
            if names is None:
                if not headerless:
                    names = items
                    continue
                if result.gff:
                    names = list(GFF_COLUMN_NAMES)
                else:
                    bed_names = bed_names or BED_COLUMN_NAMES
                    names = bed_names[:len(items)]
                    names.extend("Column%s" % (X+1) for X in range(len(names),len(items)))
                    result.bed = len(names)

            rows.append(_fit_row(items,len(names),filename,line_num))

    names = names or []
    for i, name in enumerate(names):
        md = column_md.get(i,{})
        md.pop("index",None)
        md.pop("name",None)
        result.column_metadata.append(name,**md)

    result.table = DataTable(names)
    result.table.set_data_rows(rows)
    result.gff, result.bed = classify_format(names,result.gff,result.bed)
    printer.write("Loaded %s rows with %s columns from %s." % (len(rows),len(names),filename))
    return result


#===============================================================================
# INDEX: writing
#===============================================================================

def _format_cell(value):
    """Return `value` as text, writing blank cells as the placeholder"""
    if value is None or str(value).strip() == "":
        return PLACEHOLDER
    return str(value)

def fix_extension(filename,gff=0,bed=0,gz=None):
    """Make the extension of `filename` agree with the format and
    compression of the table being written

    Parameters
    ----------
    filename : str

    gff : float
        GFF version, or 0 if table is not GFF

    bed : int
        BED column count, or 0 if table is not BED

    gz : bool or None
        If `True`, add ``.gz``. If `False`, remove any ``.gz``. If `None`,
        keep the current compression.

    Returns
    -------
    str
    """
    path, base, ext = split_filename(filename)
    compression = ""
    m = _compression_pattern.search(ext)
    if m is not None:
        compression = m.group(0)
        ext = ext[:m.start()]

    fmt = ext.lower()
    if fmt == "" \
       or (fmt in _bed_extensions and not bed) \
       or (fmt in _gff_extensions and not gff):
        ext = ".txt"

    if gz is True:
        compression = ".gz"
    elif gz is False and compression.lower() == ".gz":
        compression = ""

    return os.path.join(path,base + ext + compression)

def write_table_file(table_file,filename=None,gz=None):
    """Write a |TableFile| to disk

    Parameters
    ----------
    table_file : |TableFile|
        Contents to write. Format markers should be current (see :func:`classify_format`)

    filename : str, optional
        Destination (Default: `table_file.filename`)

    gz : bool or None, optional
        Compression override (see :func:`fix_extension`)

    Returns
    -------
    str
        Name of file written

    Raises
    ------
    ValueError
        if no filename is given or known
    """
    filename = filename or table_file.filename
    if not filename:
        raise ValueError("No filename given for table.")

    filename = fix_extension(filename,table_file.gff,table_file.bed,gz)
    fmt = _format_extension(split_filename(filename)[2])
    headerless = not table_file.headers and \
                 ((fmt in _gff_extensions and bool(table_file.gff)) or
                  (fmt in _bed_extensions and bool(table_file.bed)))

    with opener(filename,"w") as fout:
        for key in GENERAL_KEYS:
            value = getattr(table_file,key)
            if value:
                fout.write("# %s %s\n" % (key.capitalize(),value))

        md = table_file.column_metadata
        for i in md:
            extra = md.extra(i)
            if len(extra) > 0:
                tokens = ["name=%s" % escape_GFF3(md.get(i,"name"))]
                tokens.extend("%s=%s" % (escape_GFF3(K),escape_GFF3(V)) for K, V in sorted(extra.items()))
                fout.write("# Column_%s %s\n" % (i,";".join(tokens)))

        for comment in table_file.comments:
            if headerless and (comment.startswith("track") or comment.startswith("browser")):
                fout.write("%s\n" % comment)
            else:
                fout.write("#%s\n" % comment)

        if not headerless:
            fout.write("\t".join(str(X) for X in table_file.table.header()) + "\n")

        for row in table_file.table.data_rows():
            fout.write("\t".join(_format_cell(X) for X in row) + "\n")

    return filename
