"""
Test suite for LDNN.

This package contains all tests organized by component:
- test_algorithms/: Vector primitives, k-means, the network and training driver
- test_utils/: Data loading and logging helpers
"""
