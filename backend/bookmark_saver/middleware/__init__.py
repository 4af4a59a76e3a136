# Middleware package init
"""
Bookmark Saver Backend — Middleware Package
============================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: records status and duration on the way back out
    3. GZip: compresses large bookmark lists
    4. CORS: handles browser preflight requests
"""
