"""
NoteShare Backend: API Routes Package
======================================

Route Inventory:
    - auth.py:    POST /api/register, POST /api/login, GET /api/me
    - notes.py:   /api/notes CRUD (bearer token required, owner-scoped)
    - public.py:  GET /api/public/notes, GET /api/public/notes/{id}
    - health.py:  GET /health

Routes stay thin: they read the request, call a service, and set status
codes and headers. Business rules live in services.
"""
