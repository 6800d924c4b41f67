# Routes package init
"""
Portfolio Backend: API Routes Package
=======================================

Route Inventory:
    - reviews.py:  GET  /api/reviews         (list reviews)
                   POST /api/review          (submit review, shared secret)
    - projects.py: GET  /api/projects        (project cards + actionLabel)
    - contact.py:  POST /api/contact         (relay message to ADMIN_EMAIL)
    - auth.py:     POST /api/login           (credentials → bearer token)
                   POST /api/verify          (check a bearer token)
                   GET|POST /api/protected   (example guarded route)
    - health.py:   GET  /health              (service health check)

Routes are thin: they take the validated body, call a service and pick the
success response. Failures are raised as exceptions and rendered by the
handlers in main.py. OPTIONS never reaches a route; the CORS middleware
answers it.
"""
