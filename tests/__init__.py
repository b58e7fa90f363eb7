"""
Tests for the swap network core.
"""
