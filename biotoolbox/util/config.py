#!/usr/bin/env python
"""Configuration for :data:`biotoolbox`, read from a `YAML`_ file.

The configuration names databases by short aliases, sets default window and
step sizes for genome lists, and records the paths to helper applications
used by command-line scripts. An example::

    databases:
      hg19:
        path: /data/genomes/hg19.2bit
      yeast:
        path: /data/annotation/sgd.gff3
        reference_sequence_type: chromosome
    defaults:
      window: 500
      step: 500
      reference_sequence_type: chromosome
    applications:
      java: /usr/bin/java
      USeq2Text: /opt/USeq/Apps/USeq2Text
      wigToBigWig: /usr/local/bin/wigToBigWig

Configuration is located only at the boundary of a program (see
:meth:`ToolboxConfig.find`), and then passed explicitly to the objects that
need it, e.g. :class:`~biotoolbox.data.core.Data` or
:func:`~biotoolbox.genomics.sources.open_source`.
"""
import os
import copy
import yaml

from biotoolbox.util.services.exceptions import MalformedFileError

CONFIG_ENVIRONMENT_VARIABLE = "BIOTOOLBOX_CONFIG"
DEFAULT_CONFIG_FILENAME = ".biotoolbox.yaml"

_DEFAULTS = {
    "databases"    : {},
    "defaults"     : {
        "window" : 500,
        "step"   : 500,
        "reference_sequence_type" : "chromosome",
    },
    "applications" : {},
}


class ToolboxConfig(object):
    """Nested key-value configuration with dotted lookup

    Parameters
    ----------
    params : dict, optional
        Configuration values. Missing sections are filled from defaults.

    filename : str or None, optional
        File from which `params` were read, if any
    """

    def __init__(self,params=None,filename=None):
        self._params = copy.deepcopy(_DEFAULTS)
        for section, values in (params or {}).items():
            if isinstance(values,dict) and isinstance(self._params.get(section),dict):
                self._params[section].update(values)
            else:
                self._params[section] = values
        self.filename = filename

    def __repr__(self):
        return "<ToolboxConfig %s>" % (self.filename or "defaults")

    @staticmethod
    def from_file(filename):
        """Read a |ToolboxConfig| from a `YAML`_ file

        Parameters
        ----------
        filename : str

        Returns
        -------
        |ToolboxConfig|

        Raises
        ------
        |MalformedFileError|
            if the file is not valid YAML, or its top level is not a mapping
        """
        with open(filename) as fh:
            try:
                params = yaml.safe_load(fh)
            except yaml.YAMLError as e:
                raise MalformedFileError(filename,str(e))

        if params is None:
            params = {}
        if not isinstance(params,dict):
            raise MalformedFileError(filename,"Top level of configuration must be a mapping")

        return ToolboxConfig(params,filename=filename)

    @staticmethod
    def find(filename=None,environ=None):
        """Locate and read configuration for a command-line program, trying in order:

          #. `filename`, if given
          #. the file named by the environment variable ``BIOTOOLBOX_CONFIG``
          #. ``~/.biotoolbox.yaml``

        If none exist, a configuration holding only defaults is returned.

        Parameters
        ----------
        filename : str or None, optional
            Explicit configuration file

        environ : dict, optional
            Environment to search (Default: :obj:`os.environ`)

        Returns
        -------
        |ToolboxConfig|
        """
        if filename is not None:
            return ToolboxConfig.from_file(filename)

        environ = os.environ if environ is None else environ
        candidates = []
        if environ.get(CONFIG_ENVIRONMENT_VARIABLE):
            candidates.append(environ[CONFIG_ENVIRONMENT_VARIABLE])
        home = environ.get("HOME")
        if home:
            candidates.append(os.path.join(home,DEFAULT_CONFIG_FILENAME))

        for candidate in candidates:
            if os.path.exists(candidate):
                return ToolboxConfig.from_file(candidate)

        return ToolboxConfig()

    def param(self,key,default=None):
        """Look up a value by dotted key, e.g. ``"applications.java"``

        Parameters
        ----------
        key : str
            Dotted path into the configuration

        default : object, optional
            Value returned if `key` is absent (Default: `None`)

        Returns
        -------
        object
        """
        node = self._params
        for part in key.split("."):
            if not isinstance(node,dict) or part not in node:
                return default
            node = node[part]
        return node

    def database(self,name):
        """Return the configuration block for database alias `name`, or `None`"""
        block = self._params["databases"].get(name)
        if isinstance(block,str):
            block = { "path" : block }
        return block

    def application(self,name):
        """Return the configured path to application `name`, or `None`"""
        return self._params["applications"].get(name)

    @property
    def default_window(self):
        return int(self.param("defaults.window"))

    @property
    def default_step(self):
        return int(self.param("defaults.step"))

    def reference_sequence_type(self,database=None):
        """Feature type describing whole chromosomes in `database`,
        falling back to the default section"""
        if database is not None:
            block = self.database(database) or {}
            if block.get("reference_sequence_type"):
                return block["reference_sequence_type"]
        return self.param("defaults.reference_sequence_type")
