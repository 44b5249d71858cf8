"""Test suite for the options-resolver package.

This package contains unit tests validating the lazy options store,
cycle detection, schema declarations and resolution diagnostics.
"""
