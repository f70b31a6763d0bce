"""
apimock - local mock API server

Serves pre-recorded JSON responses from a directory tree, mapping URL paths
to file paths.
"""

__version__ = '1.0.0'
