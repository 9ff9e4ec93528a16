"""Record ingestion pipeline.

This module reads newline-delimited JSON sources, transforms and
validates records, and batches them for concurrent publication.
"""
