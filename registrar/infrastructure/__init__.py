"""Infrastructure Layer — durable storage and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - All file-system failures are mapped to core/errors.py types

Design Decisions:
    - Whole-collection JSON documents over an embedded database: the data set
      is a few hundred records and every write replaces the collection
"""
