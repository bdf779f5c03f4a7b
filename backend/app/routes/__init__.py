# Routes package init
"""
VisitorBook Backend: API Routes Package
=========================================

Route Inventory:
    - visitors.py: GET  /api/visitors   (current count)
                   POST /api/visitors   (increment, returns new count)
    - messages.py: GET  /api/messages   (100 newest messages)
                   POST /api/messages   (create a message)
    - health.py:   GET  /health         (service health check)

Routes are thin: they pull the session from the dependency, call the
service, and pick the status code. Errors propagate to the global
exception handlers in main.py.
"""
