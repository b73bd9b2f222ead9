#!/usr/bin/env python
"""Wrappers for file I/O: opening compressed files, and output streams that
color or timestamp their text.
"""
