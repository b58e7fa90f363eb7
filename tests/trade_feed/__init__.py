"""
Tests for trade feed aggregation.
"""
