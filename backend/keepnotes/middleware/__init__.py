# Middleware package init
"""
KeepNotes Backend — Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and error bodies
    2. Logging: Log request details with the generated request ID
    3. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)

Identity is not middleware: it is a per-route dependency
(keepnotes.security.get_current_user_id), so /health and the docs stay open.
"""
