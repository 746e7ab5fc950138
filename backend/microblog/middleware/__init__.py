# Middleware package init
"""
Microblog Backend: Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Access Log] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can read the correlation ID
    2. Access Log: times the rest of the chain
    3. GZip / CORS: Starlette built-ins
"""
