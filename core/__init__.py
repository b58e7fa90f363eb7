"""
Core Module Package.

This package contains the infrastructure components that the network,
price and trade feed packages depend on.

Components:
- clock: Testable time abstraction
- config: Configuration loading
- exceptions: Custom exception hierarchy
- retry: Fixed-interval retry for flaky RPC
- steps: Sequential multi-step runner
- helpers, assets: Small parsing and list utilities
"""
