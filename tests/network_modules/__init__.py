"""
Tests for the network module registry.
"""
