#!/usr/bin/env python
"""Utility classes, analogous to Unix-style pipes, for filtering or processing
output streams, such as file objects or :obj:`sys.stderr`.

Writers:

    :class:`AbstractWriter`
        Base class for all writers. To create a Writer, subclass this and
        override the :py:meth:`~AbstractWriter.filter` method.

    :class:`ColorWriter`
        Enable ANSI coloring of text to output streams that support color.
        For streams that do not support color, text is not colored.

    :class:`NameDateWriter`
        Prepend program name and timestamps to each line of string input before writing

And one convenience function:

    :func:`colored`
        Colorize text (via :func:`termcolor.colored`) if and only
        if color is supported by :obj:`sys.stderr`


Examples
--------
Write to stderr, prepending name and date::

    >>> my_writer = NameDateWriter("gsort")
    >>> my_writer.write("Sorted 5000 rows")
"""
import sys
import datetime
from abc import abstractmethod
from io import IOBase

import termcolor

if hasattr(sys.stderr,"isatty") and sys.stderr.isatty():
    colored = termcolor.colored
else:
    colored = lambda x, **kwargs: str(x)



#===============================================================================
# INDEX: writers
#===============================================================================

class AbstractWriter(IOBase):
    """Abstract base class for stream-writing filters.
    Create a filter by subclassing this, and defining self.filter().

    Parameters
    ----------
    stream : file-like, open for writing
        Output stream to which filtered/formatted data will be written
    """
    def __init__(self,stream):
        self.stream = stream

    def isatty(self):
        return hasattr(self.stream,"isatty") and self.stream.isatty()

    def writable(self):
        return True

    def seekable(self):
        return False

    def readable(self):
        return False

    def fileno(self):
        raise IOError()

    def write(self,data):
        """Write data to `self.stream`

        Parameters
        ----------
        data : unit of data
            Whatever data to filter/format. Often string, but not necessarily
        """
        self.stream.write(self.filter(data))

    def flush(self):
        """Flush `self.stream`"""
        self.stream.flush()

    def close(self):
        """Flush and close `self.stream`"""
        try:
            self.flush()
            self.stream.close()
        except (AttributeError,ValueError):
            pass

    @abstractmethod
    def filter(self,data):
        """Method that filters or processes each unit of data.
        Override this in subclasses

        Parameters
        ----------
        data : unit of data

        Returns
        -------
        object
            formatted data. Often string, but not necessarily
        """
        pass


class ColorWriter(AbstractWriter):
    """Detect whether output stream supports color, and enable/disable colored output

    Parameters
    ----------
    stream : file-like
        Stream to write to (Default: :obj:`sys.stderr`)
    """
    def __init__(self,stream=None):
        AbstractWriter.__init__(self,stream=stream)
        if hasattr(self.stream,"isatty") and self.stream.isatty():
            self.color = termcolor.colored

    def color(self,text,**kwargs):
        """Color `text` with attributes specified in `kwargs` if `stream` supports ANSI color.

        See :func:`termcolor.colored` for usage

        Returns
        -------
        str
            `text`, colored as indicated, if color is supported
        """
        return text


class NameDateWriter(ColorWriter):
    """Prepend program name, date, and time to each line of output"""

    def __init__(self,name,line_delimiter="\n",stream=None):
        """Create a NameDateWriter

        Parameters
        ----------
        name : str
            Name to prepend

        line_delimiter : str, optional
            Delimiter, postpended to lines. (Default `'\\n'`)

        stream : file-like
            Stream to write to (Default: :obj:`sys.stderr`)
        """
        stream = sys.stderr if stream is None else stream
        ColorWriter.__init__(self,stream=stream)
        self.name = name
        self.delimiter = line_delimiter
        self.fmtstr = "%s %s%s %s%s: {2}%s" % (self.color(name,color="blue",attrs=["bold"]),
                                               self.color("[",color="blue",attrs=["bold"]),
                                               self.color("{0}",color="green"),
                                               self.color("{1}",color="green",attrs=["bold"]),
                                               self.color("]",color="blue",attrs=["bold"]),
                                               self.delimiter
                                              )

    def filter(self,line):
        """Prepend date and time to each line of input

        Parameters
        ----------
        line : str
            Input

        Returns
        -------
        str : Input with date and time prepended
        """
        now = datetime.datetime.now()
        d   = now.strftime("%Y-%m-%d")
        t   = now.strftime("%H:%M:%S")
        return self.fmtstr.format(d,t,line.strip(self.delimiter))

    def __call__(self,line):
        self.write(line)
