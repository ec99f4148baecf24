"""Core Layer — pure domain logic, no file IO.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Cache and ChangeSubject hold in-memory state only; they never touch disk

Design Decisions:
    - Functional core separated from imperative shell: services/ orchestrate
      persistence and notification around the pure helpers defined here
"""
