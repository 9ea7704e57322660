# Routes package init
"""
TechNotes Backend - API Routes Package
========================================

Route Inventory:
    - users.py:   GET/POST/PATCH/DELETE /users
    - notes.py:   GET/POST/PATCH/DELETE /notes
    - health.py:  GET /  and  GET /health

Routes stay thin: read the body, call the service, return its result.
"""
