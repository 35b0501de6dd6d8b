"""Services Layer — async orchestration between the database and the pure core.

Invariants:
    - Services load ORM rows, convert them to core records, and persist core output
    - Services raise FarmDataError subclasses; routes never build error payloads

Design Decisions:
    - One module per use case (SP ingestion, LP ingestion, duplication...) for locality
"""
