"""
pg_dialect - PostgreSQL dialect translation engine.

Turns engine-neutral entity descriptions and parameterized query templates
into PostgreSQL: table/sequence/index DDL, literal inserts, parameter casts,
pagination and classification of database errors.
"""

__version__ = "0.1.0"
