#!/usr/bin/env python
"""This module contains classes that:

  - build :class:`argparse.ArgumentParser` objects for options shared by
    command-line scripts

  - parse those arguments into useful objects


Arguments are grouped into the following sets:

    ===========================================================   ======================================
    **Parameter/argument set**                                    **Parser building class**
    -----------------------------------------------------------   --------------------------------------
    Generic parameters (e.g. warnings, configuration file)         :class:`BaseParser`

    Chromosome sizes, from a text file or a database               :class:`ChromosomeSizeParser`
    ===========================================================   ======================================


Example
-------
Supply the parsers as `parents` when you build your script's
:py:class:`~argparse.ArgumentParser`::

    >>> bp = BaseParser()
    >>> cp = ChromosomeSizeParser()
    >>> parser = argparse.ArgumentParser(parents=[bp.get_parser(),cp.get_parser()])
    >>> args = parser.parse_args()
    >>> config = bp.get_base_ops_from_args(args)
    >>> sizes  = cp.get_chromosome_sizes_from_args(args,config)


See Also
--------
:py:mod:`argparse`
    Python documentation on argument parsing
"""
import argparse
import warnings

from biotoolbox.util.config import ToolboxConfig
from biotoolbox.util.services.exceptions import ArgumentWarning, DataWarning,\
                                                FileFormatWarning, filterwarnings
from biotoolbox.util.io.openers import NullWriter
from biotoolbox.genomics.sources import open_source, ChromosomeSizeSource


#===============================================================================
# INDEX: Base class for parsers
#===============================================================================

class Parser(object):
    """Base class for argument parser factories used below

    Parameters
    ----------
    groupname : str, optional
        Name of argument group. If not `None`, an argument group with
        the specified name will be created and added to the parser.
        If not, arguments will be in the main group.

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser,
        without preceding dashes
    """

    def __init__(self,groupname=None,prefix="",disabled=None,**kwargs):
        self.prefix = prefix
        self.disabled = [] if disabled is None else disabled
        self.groupname = groupname

        # define in __init__ of subclass
        self.arguments = []

    def get_parser(self,parser=None,groupname=None,arglist=None,title=None,description=None,**kwargs):
        """Create and populate an :class:`argparse.ArgumentParser` with arguments

        Parameters
        ----------
        parser : :class:`argparse.ArgumentParser` or None, optional
            If `None`, a new parser will be created. Otherwise arguments
            are added to `parser`.

        groupname : str or None, optional
            If not `None`, arguments are added to an option group of this name
            (Default: `self.groupname`)

        arglist : list, optional
            List of tuples of ('argument_name', dict_of_options). Defaults
            to `self.arguments`

        title : str, optional
            Optional title for parser or option group

        description : str, optional
            Optional description for parser or option group

        kwargs : keyword arguments
            Additional arguments passed during creation of :class:`argparse.ArgumentParser`

        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        if groupname is None:
            groupname = self.groupname

        if parser is None:
            if groupname is None:
                parser = argparse.ArgumentParser(description=description,add_help=False,**kwargs)
            else:
                parser = argparse.ArgumentParser(add_help=False,**kwargs)

        addto = parser
        if groupname is not None:
            addto = parser.add_argument_group(title=title,description=description)

        arglist = self.arguments if arglist is None else arglist
        for arg_name, arg_opts in filter(lambda x: x[0] not in self.disabled,arglist):
            addto.add_argument("--%s%s" % (self.prefix,arg_name),**arg_opts)

        return parser


class PrefixNamespaceWrapper(object):
    """Wrapper around :py:class:`~argparse.Namespace` objects created by parsers
    with non-empty ``prefix`` values, allowing access as if no prefix had been used.

    Parameters
    ----------
    namespace : :py:class:`~argparse.Namespace`
        Result of calling :py:meth:`argparse.ArgumentParser.parse_args`

    prefix : str
        Prefix prepended to attribute names before they are fetched
    """

    def __init__(self,namespace,prefix):
        self.namespace = namespace
        self.prefix = prefix

    def __getattr__(self,k):
        return getattr(self.namespace,"%s%s" % (self.prefix,k))


#===============================================================================
# INDEX: Chromosome size parser
#===============================================================================

_DEFAULT_CHROMOSOME_PARSER_TITLE = "chromosome size options (one required)"
_DEFAULT_CHROMOSOME_PARSER_DESCRIPTION = \
"""Chromosome sizes may be given as a two-column text file of names and lengths,
or collected from a database (a GFF3, 2bit, or BAM file, or a database alias
defined in the configuration file)."""


class ChromosomeSizeParser(Parser):
    """Parser for options that locate chromosome sizes

    Parameters
    ----------
    groupname : str, optional
        Name of argument group (Default: `"chromosome_options"`)

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser
    """

    def __init__(self,groupname="chromosome_options",prefix="",disabled=None):
        Parser.__init__(self,groupname=groupname,prefix=prefix,disabled=disabled)
        self.arguments = [
            ("db",        dict(type=str,default=None,metavar="database",
                               help="Database (alias, GFF3, 2bit, or BAM file) from which to collect chromosome lengths")),
            ("chromof",   dict(type=str,default=None,metavar="chrom.sizes",
                               help="Two-column, whitespace-delimited file of chromosome names and lengths")),
        ]

    def get_parser(self,title=_DEFAULT_CHROMOSOME_PARSER_TITLE,description=_DEFAULT_CHROMOSOME_PARSER_DESCRIPTION):
        return Parser.get_parser(self,title=title,description=description)

    def get_chromosome_source_from_args(self,args,config=None,printer=None):
        """Open a |ChromosomeSizeSource| described by command-line arguments.
        A chromosome file takes precedence over a database.

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`
            Namespace object from :py:meth:`argparse.ArgumentParser.parse_args`

        config : |ToolboxConfig|, optional
            Used to resolve database aliases

        printer : file-like, optional
            A stream to which stderr-like info can be written (Default: |NullWriter|)

        Returns
        -------
        |ChromosomeSizeSource|

        Raises
        ------
        ValueError
            if neither option was given, or the database cannot report sizes
        """
        printer = NullWriter() if printer is None else printer
        args = PrefixNamespaceWrapper(args,self.prefix)
        if args.chromof is not None:
            name = args.chromof
            source = open_source(name,config=config,kind="sizes")
        elif args.db is not None:
            name = args.db
            source = open_source(name,config=config)
        else:
            raise ValueError("Either a chromosome sizes file or a database is required.")

        if not isinstance(source,ChromosomeSizeSource):
            raise ValueError("Database '%s' cannot report chromosome sizes." % name)

        printer.write("Collecting chromosome sizes from %s ..." % name)
        return source


#===============================================================================
# INDEX: Base parser, for warnings & configuration
#===============================================================================

class BaseParser(Parser):
    """Parser for basic options: warning levels and configuration file

    Parameters
    ----------
    groupname : str, optional
        Name of argument group

    prefix : str, optional
        string prefix to add to default argument options (Default: "")

    disabled : list, optional
        list of parameter names that should be disabled from parser
    """

    def __init__(self,groupname="base_options",prefix="",disabled=None):
        Parser.__init__(self,groupname=groupname,prefix=prefix,disabled=disabled)
        self.arguments = []

    def get_parser(self,title=None,description=None):
        """Return an :py:class:`~argparse.ArgumentParser`

        Returns
        -------
        :class:`argparse.ArgumentParser`
        """
        p = Parser.get_parser(self)
        g = p.add_argument_group(title="warning/error options")
        g.add_argument("-q","--quiet",dest="warnlevel",action="store_const",const=-1,
                       help="Suppress all warning messages. Cannot use with '-v'.")
        g.add_argument("-v","--verbose",dest="warnlevel",action="count",
                       help="Increase verbosity. With '-v', show every warning. With '-vv', turn warnings into exceptions. Cannot use with '-q'. (Default: show each type of warning once)")

        c = p.add_argument_group(title="configuration options")
        c.add_argument("--config",type=str,default=None,metavar="config.yaml",
                       help="Configuration file (Default: $BIOTOOLBOX_CONFIG, then ~/.biotoolbox.yaml)")
        p.set_defaults(warnlevel=0)

        return p

    def get_base_ops_from_args(self,args):
        """Set warning filters from verbosity level and read configuration

        Parameters
        ----------
        args : :py:class:`argparse.Namespace`

        Returns
        -------
        |ToolboxConfig|
        """
        args = PrefixNamespaceWrapper(args,self.prefix)
        warnlevel = args.warnlevel
        actions = ["ignore",
                   "onceperfamily",
                   "always",
                   "error"]

        if warnlevel >= len(actions) - 1:
            warnlevel = len(actions) - 2
        try:
            action = actions[warnlevel+1]
        except IndexError:
            warnings.warn("Invalid warning level. Expected 0-3, found %s. Defaulting to `onceperfamily`." % warnlevel,ArgumentWarning)
            action = actions[1]

        for type_, msg in BIOTOOLBOX_WARNINGS:
            filterwarnings(action,message=msg,category=type_)

        return ToolboxConfig.find(args.config)


BIOTOOLBOX_WARNINGS = [

    # data.core
    (DataWarning,"has more elements than table columns"),
    (DataWarning,"has a different number of elements than the Data table"),
    (DataWarning,"Unrecognized sort direction"),
    (DataWarning,"not sorted"),

    # readers.table_file
    (FileFormatWarning,"Padding row"),
    (FileFormatWarning,"Truncating row"),

    # bin.useq2bigfile
    (DataWarning,"null scores"),
    (DataWarning,"negative scores"),
    (DataWarning,"scores above 1000"),
    (DataWarning,"non-integer scores"),
    (DataWarning,"unrecognized score value"),
]
