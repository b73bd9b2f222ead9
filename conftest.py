#!/usr/bin/env python
"""Test configuration shared by all of :data:`biotoolbox`'s test suites"""


def pytest_configure(config):
    config.addinivalue_line("markers","unit: fast tests of single functions or classes")
    config.addinivalue_line("markers","functional: tests that run command-line programs from start to finish")
