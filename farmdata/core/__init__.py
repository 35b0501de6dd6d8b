"""Core Layer — pure farm economics, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Functions take snapshot records and return records; inputs are not mutated
      unless the function says so

Design Decisions:
    - Functional core separated from the persistence shell: the reconciliation rules
      are unit-tested without a database
"""
