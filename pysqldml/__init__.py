"""
pysqldml: Generate dialect-specific data manipulation statements.

This library emits INSERT, batch INSERT, UPSERT (MERGE) and sequence reset statements for relational databases whose
SQL dialect lacks multi-row VALUES lists or a native UPSERT, binding data values as named parameters.
"""

__version__ = "0.1.0"
__license__ = "MIT"
__status__ = "Beta"
