# Middleware package init
"""
TechNotes Backend - Middleware Package
========================================

Middleware Chain (request direction):
    Request → [Request ID] → [Logging] → [CORS policy] → [CORSMiddleware] → Route Handler

    1. Request ID: correlation ID for logs and error bodies
    2. Logging: one access line per request, including rejected ones
    3. CORS policy: 403 for origins not on the allow-list
    4. CORSMiddleware: preflight handling and response headers for allowed origins
"""
