"""Remote store and publication layer.

This module stores record payloads on the remote node, publishes
statements that reference them, and reports correlated results.
"""
