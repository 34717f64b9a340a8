"""
Schema registry test suite.

This package contains:
- unit/: Unit tests (fake codecs, no I/O)
- integration/: Bootstrap and CLI tests against the shipped definitions
"""
