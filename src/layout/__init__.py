# src/layout/__init__.py

"""
Resolution of the metadata, generated metadata and content roots.
"""
