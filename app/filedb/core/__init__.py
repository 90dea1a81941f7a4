"""Core indexing engine for filedb.

This package contains the stable slot table, the path index, the
reconciler and the DatabaseManager that keeps them in lock-step with
the filesystem.
"""
