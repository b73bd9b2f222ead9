#!/usr/bin/env python
"""This module contains custom exception and warning classes, implements
a custom warning filter action, called `"onceperfamily"`, and monkey-patches
warning output to improve legibility.

Contents:

.. contents::
   :local:

The `onceperfamily` action
--------------------------
`onceperfamily` groups warning messages by families of regular expressions,
and only prints the first warning instance that matches a given family's
regular expression. In contrast, Python's native `once` action prints any string
literal once, even if it matches the same regex as another warning already given.

To use this action, use :func:`filterwarnings` to create the filter, and
:func:`warn` to issue warnings that respect it. :func:`warn_onceperfamily`
does both at once.


Exception types
---------------
|MalformedFileError|
    Raised when a file cannot be parsed as expected, and execution must halt

|ShapeMismatchError|
    Raised when an operation would leave rows and columns of a
    |Data| table with inconsistent lengths

|UnresolvableColumnError|
    Raised when a column with a required role (e.g. chromosome or start)
    cannot be identified by name

|MergeInconsistencyError|
    Raised when child files written by parallel workers cannot be merged.
    Fatal: the merged table must not be used


Warning types
-------------
|ArgumentWarning|
    Warning for command-line arguments that are nonsensical, but recoverable

|FileFormatWarning|
    Warning for slightly malformed but usable files

|DataWarning|
    Warning raised when data has unexpected or nonsensical, but recoverable
    values, or when an operation on a table was refused


See also
--------
:mod:`warnings`
    Warnings module
"""
import re
import warnings
import inspect
import linecache
import textwrap
from biotoolbox.util.io.filters import colored

_wrapper = textwrap.TextWrapper(break_long_words=False,width=77)


#===============================================================================
# INDEX: Warning and exception classes
#===============================================================================

class MalformedFileError(Exception):
    """Exception class for when files cannot be parsed as they should be
    """

    def __init__(self,filename,message,line_num=None):
        """Create a |MalformedFileError|

        Parameters
        ----------
        filename : str
            Name of file causing problem

        message : str
            Message explaining how the file is malformed.

        line_num : int or None, optional
            Number of line causing problems
        """
        Exception.__init__(self,filename,message,line_num)
        self.filename = filename
        self.msg      = message
        self.line_num = line_num

    def __str__(self):
        if self.line_num is None:
            return "Error opening file '%s': %s" % (self.filename, self.msg)
        else:
            return "Error opening file '%s' at line %s: %s" % (self.filename, self.line_num, self.msg)


class ShapeMismatchError(ValueError):
    """Raised when adding data whose length does not match the table"""
    pass


class UnresolvableColumnError(KeyError):
    """Raised when no column name matches the aliases of a required role"""

    def __init__(self,role):
        KeyError.__init__(self,role)
        self.role = role

    def __str__(self):
        return "Could not identify a '%s' column by name" % self.role


class MergeInconsistencyError(Exception):
    """Raised when child files cannot be merged back into a single table,
    e.g. because they have different numbers of columns. Indicates a corrupted
    parallel job.
    """
    pass


class ArgumentWarning(Warning):
    """Warning for nonsensical but recoverable combinations of command-line arguments"""
    pass


class FileFormatWarning(Warning):
    """Warning for slightly malformed but usable files"""
    pass


class DataWarning(Warning):
    """Warning for unexpected attributes of data.
    Raised when:

      - data has unexpected attributes
      - data has nonsensical, but recoverable values
      - an operation on a table was refused and the table left unchanged
    """



#===============================================================================
# INDEX: extensions to Python warnings
#===============================================================================

bt_once_registry = {}
"""Registry of `onceperfamily` warnings that have been seen in the current execution context"""

bt_filters       = []
"""Our own warnings filters, which allow additional actions compared to Python's"""

def filterwarnings(action,message="",category=Warning,module="",lineno=0,append=0):
    """Insert an entry into the warnings filter. Behaviors are as in :func:`warnings.filterwarnings`,
    except the additional action `'onceperfamily'` can be used to allow one warning per `family`
    of messages, specified by a regex.

    Parameters
    ----------
    action : str
        How the warning should be filtered. Acceptable values are "error",
        "ignore", "always", "default", "module", "once", and "onceperfamily"

    message : str, optional
        str that can be compiled to a regex, used to detect warnings.
        (Default: `""`, match any message)

    category : Warning or subclass, optional
        Type of warning. (Default: :class:`Warning`)

    module : str, optional
        str that can be compiled to a regex, limiting the warning behavior to modules
        that match that regex. (Default: `""`, match all modules)

    lineno : int, optional
        If 0 (default), match all warnings regardless of line number.

    append : int, optional
        If 1, add warning to end of filter list. If 0 (default), insert warning at
        beginning of filters list.
    """
    tup = (action,re.compile(message,re.I),category,re.compile(module),lineno)
    if action == "onceperfamily":
        if tup in bt_filters:
            return
        if append == 1:
            bt_filters.append(tup)
        else:
            bt_filters.insert(0,tup)
    else:
        warnings.filterwarnings(action,message=message,
                                category=category,module=module,
                                lineno=lineno,append=append)

def warn_onceperfamily(message,pattern=None,category=None,stacklevel=1):
    """Issue a warning and create a `onceperfamily` filter for it if one does not already exist

    Parameters
    ----------
    message : str
        Message of warning. Used to create the warning filter if `pattern` is `None`

    pattern : str or None, optional
        If not `None`, regex describing the family of the warning

    category: :class:`Warning`, or subclass, optional
        Type of warning

    stacklevel : int
        Frame from which the warning appears to originate
    """
    if pattern is None:
        pattern = re.escape(message)
    filterwarnings("onceperfamily",message=pattern,category=category or UserWarning)
    warn(message,category=category,stacklevel=stacklevel+1)

def warn(message,category=None,stacklevel=1):
    """Issue a non-essential warning to users, allowing `onceperfamily` filters

    Parameters
    ----------
    message : str
        Message

    category: :class:`Warning`, or subclass, optional
        Type of warning

    stacklevel : int
        Frame from which the warning appears to originate
    """
    if category is None:
        category = UserWarning

    stack = inspect.stack()
    stacklevel = min(stacklevel,len(stack)-1)
    _, filename, lineno, _, _, _ = stack[stacklevel]
    warn_explicit(message,category,filename,lineno,module=filename)

def warn_explicit(message,category,filename,lineno,module=None,registry=None,module_globals=None):
    """Low-level interface to issue warnings, checking `onceperfamily` filters
    before delegating to :func:`warnings.warn_explicit`

    Parameters
    ----------
    message : str
        Message

    category: :class:`Warning`, or subclass

    filename : str
        Name of module from which warning is issued

    lineno : int
        Line in module at which warning is called

    module : str, optional
        Module name

    registry : dict, optional
        Registry of ignore filters

    module_globals : dict, optional
        Dictionary of module-level variables
    """
    if module is None:
        frame = inspect.currentframe()
        try:
            module = inspect.getmodule(frame.f_back.f_code).__name__
        except AttributeError:
            module = __name__
        finally:
            del frame

    for _, pat, filter_category, mod, filter_line in bt_filters:
        if pat.search(message) and issubclass(category,filter_category) and\
           mod.match(module) and\
           (filter_line == 0 or filter_line == lineno):

            tup = (pat.pattern,filter_category,mod.pattern,filter_line)
            if tup in bt_once_registry:
                return
            bt_once_registry[tup] = 1
            break

    warnings.warn_explicit(message,category,filename,lineno,
                           module=module,registry=registry,
                           module_globals=module_globals)


def formatwarning(message,category,filename,lineno,file=None,line=None):
    """Wrapper to colorize warnings for readability. Overrides :func:`warnings.formatwarning`

    Parameters
    ----------
    message : str
        Warning message

    category : Warning
        Class (not instance) of warning

    filename : str
        Name of file calling warning

    lineno : int
        Line in file calling warning

    file : something implementing a `write` method
        Ignored

    line : str
        Text of line in file calling warning. If `None`, `line` is taken
        from `filename` around `lineno`

    Returns
    -------
    str
        Pretty-printed warning message
    """
    sep     = colored("-"*75,color="cyan")
    message = str(message)
    if not "\n" in message:
        message = _wrapper.fill(message)

    message = colored(message,color="white",attrs=["bold"])
    name    = colored(category.__name__,color="cyan",attrs=["bold"])

    if line is None:
        numwidth = len(str(lineno+3))
        fmtstr   = "{0: >%ss} {1}" % (numwidth)
        lines    = []
        for x in range(max(0,lineno-2),lineno+3):
            tmpline = linecache.getline(filename,x).strip("\n")
            if tmpline:
                attrs = ["bold"] if x == lineno else []
                lines.append(fmtstr.format(colored(x,color="green",attrs=attrs),
                                           colored(tmpline,attrs=attrs)
                                           ))
        line = "\n".join(lines)

    filename = "in %s, line %s:" % (colored(filename,color="cyan"),lineno)

    ltmp = [sep,name,message,filename,"",line,"",sep,""]

    return "\n".join(ltmp)


warnings.formatwarning = formatwarning
