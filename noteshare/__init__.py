"""
NoteShare Backend
=================

Multi-user note-taking service: users register, log in with a username or
email, and manage notes that are private by default and can be shared
publicly.

Layers:
    ┌─────────────────────────────────────┐
    │   Routes (API) + access guard       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services                          │  ← auth flows, ownership policy
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database                          │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
