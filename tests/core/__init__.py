"""
Tests for core infrastructure: retry, steps, config and parsing helpers.
"""
