#!/usr/bin/env python
"""Narrow interfaces to annotation databases and genome files.

|Data| tables never depend on a concrete database type. Instead, they use
two capabilities:

    ==========================   ==================================================
    **Capability**               **Methods**
    --------------------------   --------------------------------------------------
    |FeatureLister|              :meth:`~FeatureLister.features` yields annotated
                                 features, :meth:`~FeatureLister.feature_length`
                                 looks up the length of a named feature

    |ChromosomeSizeSource|       :meth:`~ChromosomeSizeSource.chromosome_sizes`
                                 returns an ordered mapping of chromosome names to
                                 lengths
    ==========================   ==================================================

Implementations provided here:

    ========================   =================================   ================
    **Class**                  **Backed by**                       **Capabilities**
    ------------------------   ---------------------------------   ----------------
    |ChromSizesFile|           Two-column text file                sizes
    |GFF3Annotation|           `GFF3`_ or `GTF2`_ file             features, sizes
    |TwoBitGenome|             `2bit`_ sequence file               sizes
    |AlignmentFileHeader|      Header of a `BAM`_ file             sizes
    ========================   =================================   ================

Use :func:`open_source` to pick an implementation from a file name or a
database alias defined in the configuration.
"""
import os
import re
import collections
from abc import abstractmethod

import pysam
import twobitreader

from biotoolbox.readers.gff_tokens import parse_attributes
from biotoolbox.util.io.openers import opener
from biotoolbox.util.services.exceptions import MalformedFileError

_compression_pattern = re.compile(r"\.(?:gz|bz2)$",re.I)


#===============================================================================
# INDEX: capability interfaces
#===============================================================================

class FeatureLister(object):
    """Source of annotated genomic features"""

    @abstractmethod
    def features(self,types=None):
        """Yield features of the given types

        Parameters
        ----------
        types : list of str or None, optional
            Feature types to return, compared case-insensitively. A type may
            be qualified by source, as in ``"gene:SGD"``. If `None`, return all
            features.

        Yields
        ------
        dict
            With keys `id`, `name`, `type`, `source`, `chromosome`, `start`,
            `stop` (1-based, inclusive), and `strand`
        """
        pass

    @abstractmethod
    def feature_length(self,name):
        """Return the length of the first feature whose name or ID is `name`,
        or `None` if no such feature exists"""
        pass


class ChromosomeSizeSource(object):
    """Source of chromosome names and lengths"""

    @abstractmethod
    def chromosome_sizes(self):
        """Return chromosome lengths

        Returns
        -------
        :class:`collections.OrderedDict`
            Chromosome names mapped to lengths, in source order
        """
        pass


#===============================================================================
# INDEX: implementations
#===============================================================================

class ChromSizesFile(ChromosomeSizeSource):
    """Chromosome sizes from a whitespace-delimited file of names and lengths,
    as used by `UCSC`_ utilities. Lines beginning with `#` are ignored.

    Parameters
    ----------
    filename : str
    """

    def __init__(self,filename):
        self.filename = filename

    def __repr__(self):
        return "<ChromSizesFile %s>" % self.filename

    def chromosome_sizes(self):
        """Return chromosome lengths

        Returns
        -------
        :class:`collections.OrderedDict`

        Raises
        ------
        |MalformedFileError|
            if a line does not contain a name and an integer length
        """
        sizes = collections.OrderedDict()
        with opener(self.filename) as fh:
            for line_num, line in enumerate(fh,1):
                if line.startswith("#") or len(line.strip()) == 0:
                    continue
                items = line.split()
                try:
                    sizes[items[0]] = int(items[1])
                except (IndexError,ValueError):
                    raise MalformedFileError(self.filename,"Expected chromosome name and length, found '%s'" % line.strip(),line_num)

        return sizes


class GFF3Annotation(FeatureLister,ChromosomeSizeSource):
    """Features and chromosome sizes from a `GFF3`_ or `GTF2`_ annotation file

    The file is read once, when features or sizes are first requested.
    Chromosome sizes come from ``##sequence-region`` pragmas if present,
    otherwise from features whose type is `reference_type`.

    Parameters
    ----------
    filename : str
        Annotation file. May be gzipped or bzipped.

    reference_type : str, optional
        Type of features describing whole chromosomes (Default: `"chromosome"`)
    """

    def __init__(self,filename,reference_type="chromosome"):
        self.filename = filename
        self.reference_type = reference_type
        self._features = None
        self._regions  = None
        base = _compression_pattern.sub("",filename).lower()
        self.gff_version = 2.5 if base.endswith(".gtf") else 3

    def __repr__(self):
        return "<GFF3Annotation %s>" % self.filename

    def _parse_feature(self,items,line_num):
        try:
            start = int(items[3])
            stop  = int(items[4])
        except ValueError:
            raise MalformedFileError(self.filename,"Start and end must be integers",line_num)

        attr = parse_attributes(items[8],self.gff_version) if len(items) > 8 else {}
        fid  = attr.get("ID") or attr.get("transcript_id") or attr.get("gene_id") or attr.get("Name")
        name = attr.get("Name") or attr.get("gene_name") or attr.get("transcript_name") or fid
        if isinstance(name,list):
            name = name[0]

        return {
            "id"         : fid,
            "name"       : name,
            "type"       : items[2],
            "source"     : items[1],
            "chromosome" : items[0],
            "start"      : start,
            "stop"       : stop,
            "strand"     : items[6],
            "attr"       : attr,
        }

    def _load(self):
        if self._features is not None:
            return

        self._features = []
        self._regions  = collections.OrderedDict()
        with opener(self.filename) as fh:
            for line_num, line in enumerate(fh,1):
                line = line.rstrip("\r\n")
                if line.startswith("##FASTA"):
                    break
                elif line.startswith("##sequence-region"):
                    items = line.split()
                    try:
                        self._regions[items[1]] = int(items[3])
                    except (IndexError,ValueError):
                        raise MalformedFileError(self.filename,"Malformed sequence-region pragma: '%s'" % line,line_num)
                elif line.startswith("#") or len(line.strip()) == 0:
                    continue
                else:
                    items = line.split("\t")
                    if len(items) < 8:
                        raise MalformedFileError(self.filename,"Expected at least 8 tab-delimited columns, found %s" % len(items),line_num)
                    self._features.append(self._parse_feature(items,line_num))

    @staticmethod
    def _type_matcher(types):
        wanted = []
        for t in types:
            ftype, _, source = str(t).partition(":")
            wanted.append((ftype.lower(),source.lower()))

        def matches(feature):
            for ftype, source in wanted:
                if feature["type"].lower() == ftype and (not source or feature["source"].lower() == source):
                    return True
            return False

        return matches

    def features(self,types=None):
        self._load()
        if types is None:
            matches = lambda x: True
        else:
            matches = self._type_matcher([types] if isinstance(types,str) else types)

        for feature in self._features:
            if matches(feature):
                yield feature

    def feature_length(self,name):
        self._load()
        for feature in self._features:
            if name in (feature["name"],feature["id"]):
                return feature["stop"] - feature["start"] + 1
        return None

    def chromosome_sizes(self):
        self._load()
        if len(self._regions) > 0:
            return collections.OrderedDict(self._regions)

        sizes = collections.OrderedDict()
        for feature in self.features([self.reference_type]):
            sizes[feature["chromosome"]] = feature["stop"]
        return sizes


class TwoBitGenome(ChromosomeSizeSource):
    """Chromosome sizes from a `2bit`_ sequence file, read via :mod:`twobitreader`

    Parameters
    ----------
    filename : str
    """

    def __init__(self,filename):
        self.filename = filename

    def __repr__(self):
        return "<TwoBitGenome %s>" % self.filename

    def chromosome_sizes(self):
        genome = twobitreader.TwoBitFile(self.filename)
        sizes = genome.sequence_sizes()
        return collections.OrderedDict((K,sizes[K]) for K in genome.keys())


class AlignmentFileHeader(ChromosomeSizeSource):
    """Chromosome sizes from the header of a `BAM`_ file, read via :mod:`pysam`

    Parameters
    ----------
    filename : str
    """

    def __init__(self,filename):
        self.filename = filename

    def __repr__(self):
        return "<AlignmentFileHeader %s>" % self.filename

    def chromosome_sizes(self):
        bamfile = pysam.AlignmentFile(self.filename,"rb")
        try:
            return collections.OrderedDict(zip(bamfile.references,bamfile.lengths))
        finally:
            bamfile.close()


#===============================================================================
# INDEX: resolution of names to sources
#===============================================================================

_source_classes = [
    (re.compile(r"\.(?:gff3?|gtf)$",re.I), GFF3Annotation),
    (re.compile(r"\.2bit$",re.I),          TwoBitGenome),
    (re.compile(r"\.bam$",re.I),           AlignmentFileHeader),
]

def open_source(name,config=None,kind=None):
    """Open a feature or chromosome size source from a file name or alias

    If `config` defines a database alias `name`, its `path` is used.
    The implementation is then chosen by file extension:

        ===========================   =======================
        **Extension**                 **Class**
        ---------------------------   -----------------------
        .gff, .gff3, .gtf (+ .gz)     |GFF3Annotation|
        .2bit                         |TwoBitGenome|
        .bam                          |AlignmentFileHeader|
        anything else                 |ChromSizesFile|
        ===========================   =======================

    Parameters
    ----------
    name : str
        File name or database alias

    config : |ToolboxConfig|, optional
        Configuration holding database aliases

    kind : str or None, optional
        If `"sizes"`, always open `name` as a |ChromSizesFile|

    Returns
    -------
    |FeatureLister|, |ChromosomeSizeSource|, or both

    Raises
    ------
    ValueError
        if `name` is neither a configured alias nor an existing file
    """
    path = name
    reference_type = "chromosome"
    block = None if config is None else config.database(name)
    if block is not None:
        path = block.get("path")
        reference_type = config.reference_sequence_type(name)
    elif config is not None:
        reference_type = config.reference_sequence_type()

    if path is None or not os.path.exists(path):
        raise ValueError("Database '%s' is neither a configured alias nor an existing file." % name)

    if kind == "sizes":
        return ChromSizesFile(path)

    base = _compression_pattern.sub("",path)
    for pattern, cls in _source_classes:
        if pattern.search(base):
            if cls is GFF3Annotation:
                return cls(path,reference_type=reference_type)
            return cls(path)

    return ChromSizesFile(path)
