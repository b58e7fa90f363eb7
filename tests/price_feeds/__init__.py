"""
Tests for price sources, the first-success race and the TTL cache.
"""
