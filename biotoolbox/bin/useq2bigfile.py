#!/usr/bin/env python
"""Convert a `USeq`_ archive to a `BigWig`_ or `BigBed`_ file.

The archive is first unpacked to `BED`_ text by the `USeq2Text` java
application. The `BED`_ records are then cleaned up and converted to an
intermediate file, which is finally compressed by one of Jim Kent's `UCSC`_
utilities:

    =================   =====================================   =====================
    **Output**          **Intermediate file**                   **UCSC utility**
    -----------------   -------------------------------------   ---------------------
    `BigWig`_           variableStep `wiggle`_ (default)        ``wigToBigWig``
    `BigWig`_           `bedGraph`_ (with ``--gr``)             ``bedGraphToBigWig``
    `BigBed`_           `BED`_                                  ``bedToBigBed``
    =================   =====================================   =====================

For `BigWig`_ output, records at identical positions are merged into a single
score with ``--method``. Wiggle positions are the midpoints of records.
Records beginning past the end of a chromosome are dropped, and records
extending past it are clipped.

For `BigBed`_ output, scores are forced into the integer range 0-1000 that the
format requires, and unstranded records are placed on the plus strand.

Chromosome sizes are read from a file (``--chromof``), or collected from a
database (``--db``). Paths to ``java``, `USeq2Text`, and the `UCSC`_
utilities may be given as options, in the ``applications`` section of the
configuration file, or found on the ``PATH``.
"""
import argparse
import inspect
import os
import re
import sys
import shutil
import subprocess
import tempfile
import warnings

import numpy

from biotoolbox.genomics.sources import ChromSizesFile
from biotoolbox.util.io.openers import opener, get_short_name
from biotoolbox.util.io.filters import NameDateWriter
from biotoolbox.util.scriptlib.argparsers import BaseParser, ChromosomeSizeParser
from biotoolbox.util.scriptlib.help_formatters import format_module_docstring
from biotoolbox.util.services.exceptions import DataWarning, MalformedFileError, warn_onceperfamily

warnings.simplefilter("once")
printer = NameDateWriter(get_short_name(inspect.stack()[-1][1]))

REDUCERS = {
    "mean"   : numpy.mean,
    "median" : numpy.median,
    "sum"    : numpy.sum,
    "max"    : numpy.max,
}
"""Functions used to merge scores of records at identical positions"""

_useq_pattern   = re.compile(r"\.useq$",re.I)
_output_pattern = re.compile(r"\.(?:bw|bb|bigwig|bigbed)$",re.I)


#===============================================================================
# INDEX: helper functions
#===============================================================================

def format_score(value):
    """Format a merged score, dropping the decimal part of whole numbers"""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return str(value)

def read_bed(filename,strand=None):
    """Yield split lines of a `BED`_ file, skipping comments and blank lines

    Parameters
    ----------
    filename : str

    strand : str or None, optional
        If `"f"`, skip reverse-strand records. If `"r"`, skip forward-strand
        records. If `None`, keep all.

    Yields
    ------
    list of str
    """
    with opener(filename) as fh:
        for line in fh:
            if line.startswith("#") or line.startswith("track") or len(line.strip()) == 0:
                continue
            items = line.rstrip("\r\n").split("\t")
            if len(items) < 6:
                items.extend(["."] * (6 - len(items)))
            if strand == "f" and items[5] == "-":
                continue
            if strand == "r" and items[5] == "+":
                continue
            yield items

def _chromosome_size(sizes,chrom):
    try:
        return sizes[chrom]
    except KeyError:
        raise ValueError("No chromosome length recorded for chromosome '%s'." % chrom)

def _merge(scores,reducer):
    if len(scores) == 1:
        return scores[0]
    return format_score(reducer([float(X) for X in scores]))

def convert_to_bedgraph(bedfile,outfile,sizes,reducer=numpy.mean,strand=None):
    """Write a `bedGraph`_ file from `BED`_ records, merging scores of records
    with identical coordinates

    Parameters
    ----------
    bedfile : str
        Input `BED`_ file

    outfile : str
        Output `bedGraph`_ file

    sizes : dict
        Chromosome names mapped to lengths

    reducer : callable, optional
        Function that merges a list of scores (Default: :func:`numpy.mean`)

    strand : str or None, optional
        Strand filter, as in :func:`read_bed`

    Returns
    -------
    int
        Number of intervals written

    Raises
    ------
    ValueError
        if a record's chromosome is not in `sizes`
    """
    count = 0
    with open(outfile,"w") as fout:
        previous = None
        scores = []
        for items in read_bed(bedfile,strand):
            chrom = items[0]
            size  = _chromosome_size(sizes,chrom)
            start, end = int(items[1]), int(items[2])
            if start > size:
                continue
            end = min(end,size)

            position = (chrom,start,end)
            if position == previous:
                scores.append(items[4])
                continue

            if previous is not None:
                fout.write("%s\t%s\t%s\t%s\n" % (previous + (_merge(scores,reducer),)))
                count += 1
            previous = position
            scores = [items[4]]

        if previous is not None:
            fout.write("%s\t%s\t%s\t%s\n" % (previous + (_merge(scores,reducer),)))
            count += 1

    return count

def convert_to_wig(bedfile,outfile,sizes,reducer=numpy.mean,strand=None):
    """Write a variableStep `wiggle`_ file from `BED`_ records, placing each
    score at the midpoint of its record and merging scores at identical positions

    Parameters
    ----------
    bedfile : str
        Input `BED`_ file

    outfile : str
        Output `wiggle`_ file

    sizes : dict
        Chromosome names mapped to lengths

    reducer : callable, optional
        Function that merges a list of scores (Default: :func:`numpy.mean`)

    strand : str or None, optional
        Strand filter, as in :func:`read_bed`

    Returns
    -------
    int
        Number of positions written

    Raises
    ------
    ValueError
        if a record's chromosome is not in `sizes`
    """
    count = 0
    with open(outfile,"w") as fout:
        last_chrom = None
        previous = None
        scores = []
        for items in read_bed(bedfile,strand):
            chrom = items[0]
            size  = _chromosome_size(sizes,chrom)
            start, end = int(items[1]) + 1, int(items[2])
            pos = start if start == end else (start + end) // 2
            if pos > size:
                continue

            if (chrom,pos) == previous:
                scores.append(items[4])
                continue

            if previous is not None:
                fout.write("%s %s\n" % (previous[1],_merge(scores,reducer)))
                count += 1
            if chrom != last_chrom:
                fout.write("variableStep chrom=%s\n" % chrom)
                last_chrom = chrom
            previous = (chrom,pos)
            scores = [items[4]]

        if previous is not None:
            fout.write("%s %s\n" % (previous[1],_merge(scores,reducer)))
            count += 1

    return count

def fix_bed_score(score,line_num):
    """Force a `BED`_ score into the integer range 0-1000, warning once for
    each kind of correction

    Parameters
    ----------
    score : str

    line_num : int
        Line number, for warnings

    Returns
    -------
    str
    """
    if score == ".":
        warn_onceperfamily("BED null scores of '.' are not allowed. Converting all to 0.",
                           "null scores",DataWarning)
        return "0"

    try:
        value = float(score)
    except ValueError:
        warn_onceperfamily("BED unrecognized score value '%s' at line %s. Setting to 0." % (score,line_num),
                           "unrecognized score value",DataWarning)
        return "0"

    if value < 0:
        warn_onceperfamily("BED negative scores such as '%s' at line %s are not allowed. Converting all to 0." % (score,line_num),
                           "negative scores",DataWarning)
        return "0"
    if value > 1000:
        warn_onceperfamily("BED scores above 1000 such as '%s' at line %s are not allowed. Converting all to 1000." % (score,line_num),
                           "scores above 1000",DataWarning)
        return "1000"
    if not score.isdigit():
        warn_onceperfamily("BED non-integer scores such as '%s' at line %s are not allowed. Truncating all." % (score,line_num),
                           "non-integer scores",DataWarning)
        return str(int(value))

    return score

def clean_bed(bedfile,outfile,sizes,strand=None):
    """Write a copy of a `BED`_ file acceptable to ``bedToBigBed``: coordinates
    clipped to chromosome ends, scores forced to integers from 0 to 1000, and
    unstranded records placed on the plus strand

    Parameters
    ----------
    bedfile : str
        Input `BED`_ file

    outfile : str
        Output `BED`_ file

    sizes : dict
        Chromosome names mapped to lengths

    strand : str or None, optional
        Strand filter, as in :func:`read_bed`

    Returns
    -------
    int
        Number of records written
    """
    count = 0
    with open(outfile,"w") as fout:
        for line_num, items in enumerate(read_bed(bedfile,strand),1):
            size = _chromosome_size(sizes,items[0])
            if int(items[1]) > size:
                continue
            if int(items[2]) > size:
                items[2] = str(size)

            items[4] = fix_bed_score(items[4],line_num)
            if items[5] == ".":
                items[5] = "+"
            fout.write("\t".join(items) + "\n")
            count += 1

    return count

def find_application(name,explicit=None,config=None):
    """Locate an executable: `explicit` path first, then the configuration,
    then the ``PATH``

    Returns
    -------
    str or None
    """
    if explicit:
        return explicit
    if config is not None and config.application(name):
        return config.application(name)
    return shutil.which(name)

def write_chromosome_sizes(sizes,filename):
    """Write chromosome sizes as a two-column file, sorted by name"""
    with open(filename,"w") as fout:
        for chrom in sorted(sizes):
            fout.write("%s\t%s\n" % (chrom,sizes[chrom]))

def run_command(cmd):
    """Run an external program, raising :class:`subprocess.CalledProcessError` on failure"""
    printer.write("Running '%s' ..." % " ".join(cmd))
    subprocess.check_call(cmd)

def _die(message):
    printer.write(message)
    sys.exit(1)

def _resolve_big_app(args,config):
    """Choose the UCSC utility and, for BigWig output, whether to write bedGraph"""
    app = args.bigapp
    bedgraph = args.gr
    if args.bw:
        if app:
            if bedgraph:
                if not app.endswith("bedGraphToBigWig"):
                    _die("Requested bedGraph, but utility '%s' is not bedGraphToBigWig." % app)
            elif app.endswith("bedGraphToBigWig"):
                bedgraph = True
            elif not app.endswith("wigToBigWig"):
                _die("Unknown BigWig conversion utility '%s'." % app)
        else:
            name = "bedGraphToBigWig" if bedgraph else "wigToBigWig"
            app = find_application(name,config=config)
            if not app:
                _die("Unable to find the %s utility." % name)
    else:
        if app:
            if not app.endswith("ToBigBed"):
                _die("Requested BigBed conversion, but utility '%s' does not make BigBed files." % app)
        else:
            app = find_application("bedToBigBed",config=config)
            if not app:
                _die("Unable to find the bedToBigBed utility.")

    return app, bedgraph


#===============================================================================
# INDEX: program body
#===============================================================================

def main(argv=sys.argv[1:]):
    """Command-line program

    Parameters
    ----------
    argv : list, optional
        A list of command-line arguments, which will be processed
        as if the script were called from the command line if
        :py:func:`main` is called directly.

        Default: `sys.argv[1:]`. The command-line arguments, if the script is
        invoked from the command line

    Returns
    -------
    int
        Exit status
    """
    bp = BaseParser()
    cp = ChromosomeSizeParser()
    parser = argparse.ArgumentParser(description=format_module_docstring(__doc__),
                                     formatter_class=argparse.RawDescriptionHelpFormatter,
                                     parents=[bp.get_parser(),cp.get_parser()])
    parser.add_argument("--in",dest="infile",type=str,default=None,metavar="file.useq",
                        help="Input USeq archive")
    parser.add_argument("--out",type=str,default=None,
                        help="Output file (Default: input file name, with .bw or .bb extension)")
    parser.add_argument("--bw",default=False,action="store_true",
                        help="Make a BigWig file")
    parser.add_argument("--bb",default=False,action="store_true",
                        help="Make a BigBed file")
    parser.add_argument("--gr",default=False,action="store_true",
                        help="For BigWig output, write an intermediate bedGraph instead of a wiggle file")
    parser.add_argument("--method",choices=sorted(REDUCERS),default="mean",
                        help="How to merge scores of records at identical positions (Default: mean)")
    parser.add_argument("--strand",choices=["f","r"],default=None,
                        help="Keep only records on forward (f) or reverse (r) strand (Default: keep all)")
    parser.add_argument("--bigapp",type=str,default=None,
                        help="Path to UCSC conversion utility (Default: from configuration or PATH)")
    parser.add_argument("--useqapp",type=str,default=None,
                        help="Path to USeq2Text application (Default: from configuration)")
    parser.add_argument("useq",nargs="?",default=None,metavar="file.useq",
                        help="Input USeq archive, if not given by --in")

    args = parser.parse_args(argv)
    config = bp.get_base_ops_from_args(args)

    # validate
    infile = args.infile or args.useq
    if infile is None:
        _die("No input file given.")
    if _useq_pattern.search(infile) is None:
        _die("Input file '%s' does not have a .useq extension." % infile)
    if not (args.bw or args.bb):
        _die("Either --bw or --bb is required.")
    if args.bw and args.bb:
        _die("Only one of --bw or --bb may be given.")
    if args.db is None and args.chromof is None:
        _die("Either a chromosome sizes file (--chromof) or a database (--db) is required.")

    reducer = REDUCERS[args.method]

    # applications
    java = find_application("java",config=config)
    if not java:
        _die("Unable to find java.")
    useq_app = find_application("USeq2Text",explicit=args.useqapp,config=config)
    if not useq_app:
        _die("Path to the USeq2Text application must be given with --useqapp or in the configuration file.")
    big_app, bedgraph = _resolve_big_app(args,config)

    # chromosome sizes
    temp_files = []
    try:
        source = cp.get_chromosome_source_from_args(args,config=config,printer=printer)
        sizes = source.chromosome_sizes()
    except (ValueError,MalformedFileError) as e:
        _die(str(e))

    if len(sizes) == 0:
        _die("No chromosome sizes found in '%s'." % (args.chromof or args.db))

    if isinstance(source,ChromSizesFile):
        chrom_file = source.filename
    else:
        fh = tempfile.NamedTemporaryFile(mode="w",prefix="chr_sizes",suffix=".txt",delete=False)
        fh.close()
        chrom_file = fh.name
        write_chromosome_sizes(sizes,chrom_file)
        temp_files.append(chrom_file)

    base = args.out or _useq_pattern.sub("",infile)
    base = _output_pattern.sub("",base)
    input_bed = _useq_pattern.sub(".bed",infile)

    try:
        printer.write("Running USeq2Text ...")
        try:
            run_command([java,"-Xmx1500M","-jar",useq_app,"-f",infile])
        except (subprocess.CalledProcessError,OSError) as e:
            _die("USeq2Text failed: %s" % e)

        if not os.path.exists(input_bed) or os.path.getsize(input_bed) == 0:
            if os.path.exists(input_bed):
                os.remove(input_bed)
            _die("USeq2Text did not produce '%s'. See stderr for clues." % input_bed)
        temp_files.append(input_bed)

        printer.write("Checking for out-of-bounds features and duplicates ...")
        if args.bw:
            outfile = base + ".bw"
            intermediate = base + (".bedgraph" if bedgraph else ".wig")
        else:
            outfile = base + ".bb"
            fh = tempfile.NamedTemporaryFile(mode="w",prefix="fixed_bed",suffix=".bed",delete=False)
            fh.close()
            intermediate = fh.name
        temp_files.append(intermediate)

        try:
            if not args.bw:
                count = clean_bed(input_bed,intermediate,sizes,args.strand)
            elif bedgraph:
                count = convert_to_bedgraph(input_bed,intermediate,sizes,reducer,args.strand)
            else:
                count = convert_to_wig(input_bed,intermediate,sizes,reducer,args.strand)
        except ValueError as e:
            _die(str(e))

        printer.write("Wrote %s records to intermediate file '%s'." % (count,intermediate))

        try:
            run_command([big_app,intermediate,chrom_file,outfile])
        except (subprocess.CalledProcessError,OSError) as e:
            _die("Conversion failed: %s" % e)
    finally:
        for f in temp_files:
            if os.path.exists(f):
                os.remove(f)

    printer.write("Conversion success! Wrote file '%s'." % outfile)
    printer.write("Done.")
    return 0


if __name__ == "__main__":
    main()
