# Routes package init
"""
KeepNotes Backend — API Routes Package
========================================

Route Inventory:
    - notes.py:   POST   /api/notes                 (create)
                  GET    /api/notes                 (active notes)
                  GET    /api/notes/archived        (archived notes)
                  GET    /api/notes/trash           (recently deleted notes)
                  GET    /api/notes/reminders       (due reminders)
                  GET    /api/notes/{id}            (single note)
                  PATCH  /api/notes/{id}            (partial update)
                  DELETE /api/notes/{id}            (soft delete)
                  PATCH  /api/notes/{id}/archive    (toggle archive)
    - health.py:  GET    /health                    (service health check)

Design Principle:
    Routes are THIN. They resolve the caller's identity and the db session,
    call the service, and shape the HTTP response. Errors propagate to the
    global handlers in main.py.
"""
