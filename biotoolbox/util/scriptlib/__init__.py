#!/usr/bin/env python
"""Tools for writing command-line scripts: argument parser factories and
help formatting.
"""
