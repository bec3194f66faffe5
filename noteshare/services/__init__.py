"""
NoteShare Backend: Services Layer
==================================

Business logic between the routes (HTTP) and the database.

Service Inventory:
    - PasswordHasher:   bcrypt hash / constant-time verify
    - TokenService:     HS256 session tokens, 24 hour lifetime
    - CredentialStore:  identity lookups and inserts
    - AuthService:      registration and login flows
    - NoteService:      note CRUD scoped by ownership and visibility
"""
