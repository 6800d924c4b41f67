# Middleware package init
"""
Portfolio Backend: Middleware Package
=======================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID stored in a ContextVar, echoed in responses
    2. Logging: one access line per request, with the ID
    3. CORS: headers on every response; any OPTIONS is answered with 204
       before routing, so no handler, auth check or store call runs for it
"""
