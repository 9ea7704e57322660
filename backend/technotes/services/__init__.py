# Services package init
"""
TechNotes Backend - Services Layer
====================================

What:  Business logic between routes (HTTP) and models (persistence).

Service Inventory:
    - PasswordService: bcrypt hashing with a fixed cost factor
    - UserService: user listing, create/update/delete with duplicate checks
    - NoteService: note listing, create/update/delete, ticket numbering
"""
