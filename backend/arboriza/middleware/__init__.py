# Middleware package init
"""
Arboriza Backend - Middleware Package
======================================

What:  Cross-cutting HTTP policies applied ahead of every route.

Middleware Chain (order matters):
    Request → [Request ID] → [Rate Limit] → [Logging] → [Security Headers]
            → [GZip] → [CORS] → Route Handler

    1. Request ID first: every response, 429s included, carries the ID
    2. Rate Limit: rejected requests cost nothing downstream
    3. Logging: one access line per request, tagged with the request ID
    4. Security Headers: hardening headers on every response
    5. CORS: Starlette's CORSMiddleware (answers preflight requests)
"""
