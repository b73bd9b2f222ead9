#!/usr/bin/env python
"""Post-processors that reformat module docstrings for use as command-line
script help, by removing `reStructuredText`_ markup and truncating at
`numpydoc`_ section tokens.
"""
import re

pyrst_pattern = re.compile(r"(?P<spacing>^|\s+)(?::(?P<domain>[^:`<>]+))?:(?P<role>[^:`]*):`(?P<argument>[^`<>]+)(?: +<(?P<pointer>[^`]+)>)?`")
"""RegEx pattern that detects `reStructuredText`_ markup of python tokens
of the form ``:domain:role:`argument``` or simply ``:role:`argument```,
if the token is preceded by whitespace or begins a line.
"""

subst_pattern = re.compile(r"\|([^|]*)\|")
"""RegEx pattern that matches `reStructuredText`_ substitution tokens
of form ``|substitution|``
"""

link_pattern = re.compile(r"`([^`<>]+)( <[^`]+>)?`_")
"""RegEx pattern that matches `reStructuredText`_ link references of forms ```Linkname`_``
and ```Link text <url>`_``
"""

_separator = "\n" + (78*"-") + "\n"


def shorten_help(inp):
    """Strip `reStructuredText`_ markup from a docstring and truncate it
    at the first `numpydoc`_ section token

    Parameters
    ----------
    inp : multi-line str
        Docstring to format

    Returns
    -------
    str
        Cleaned helptext
    """
    inp = pyrst_pattern.sub(r"\g<spacing>\g<argument>",inp)
    inp = subst_pattern.sub(r"\g<1>",inp)
    inp = link_pattern.sub(r"\g<1>",inp)

    tokens = ["Parameters",
              "Returns",
              "Yields",
              "Raises",
              "Attributes",
              "See also",
              ]

    indices = [inp.find(X) for X in tokens]
    indices = [X if X >= 0 else len(inp) for X in indices]
    return inp[:min(indices)].strip() + "\n"

def format_module_docstring(inp):
    """Format a module docstring for command-line help, surrounded by separators

    Parameters
    ----------
    inp : multi-line str
        Module docstring to format

    Returns
    -------
    str
        Formatted docstring
    """
    return _separator + "\n" + shorten_help(inp) + "\n" + _separator
