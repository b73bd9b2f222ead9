#!/usr/bin/env python
"""Exceptions and warnings, with the `onceperfamily` warning filter"""
