#!/usr/bin/env python
"""Setup script for biotoolbox.

Command-line scripts are detected automatically from ``biotoolbox/bin``
(see :func:`get_scripts`).
"""
import os
from setuptools import setup, find_packages

biotoolbox_version = "1.0.0"


#===============================================================================
# Package metadata
#===============================================================================

with open("README.rst") as f:
    long_description = f.read()

install_requires = [
    "numpy>=1.9.4",
    "pandas>=0.17.0",
    "pysam>=0.8.4",
    "twobitreader>=3.0.0",
    "termcolor",
    "pyyaml>=5.1",
]

packages = find_packages()


def get_scripts():
    """Detect command-line scripts automatically

    Returns
    -------
    list
        list of strings describing command-line scripts
    """
    binscripts = [
        X.replace(".py", "") for X in filter(
            lambda x: x.endswith(".py") and  "__init__" not in x,
            os.listdir(os.path.join("biotoolbox",  "bin")),
        )
    ]
    return ["%s = biotoolbox.bin.%s:main" % (X, X) for X in binscripts]


#===============================================================================
# Program body
#===============================================================================

setup(

    name             = "biotoolbox",
    version          = biotoolbox_version,
    long_description =  long_description,
    long_description_content_type = "text/x-rst",

    description      = "Tab-delimited data tables for genomic features and windows",
    license          = "BSD 3-Clause",
    keywords         = "genomics sequencing data tables bed gff bigwig biology",
    platforms        = "OS Independent",

    classifiers      = [
         'Development Status :: 4 - Beta',
         'Programming Language :: Python :: 3',

         'Topic :: Scientific/Engineering :: Bio-Informatics',
         'Topic :: Software Development :: Libraries',

         'Intended Audience :: Science/Research',
         'Intended Audience :: Developers',

         'License :: OSI Approved :: BSD License',
         'Operating System :: POSIX',
         'Natural Language :: English',
    ],

    zip_safe = False,
    packages = packages,

    package_dir = {
        "biotoolbox"  : "biotoolbox",
    },

    entry_points = {
        "console_scripts" : get_scripts()
    },

    python_requires  = ">=3.6",
    install_requires = install_requires,
    extras_require   = {
        "test" : ["pytest"],
    },

) # yapf: disable
