# Routes package init
"""
Arboriza Backend - API Routes Package
======================================

Route Inventory:
    - auth.py:     POST /api/auth/register, POST /api/auth/login
    - plants.py:   GET  /api/plantas, POST /api/plants,
                   GET/POST /api/plants/{plantId}/comments
    - species.py:  GET  /api/especies, GET /api/filtros
    - forum.py:    GET/POST /api/rooms,
                   GET/POST /api/rooms/{roomId}/messages,
                   POST /api/rooms/{roomId}/join
    - health.py:   GET  /api/health

Routes stay thin: pull data out of the request, call a service, pick the
status code. Errors are raised by the services and rendered by the global
exception handlers in main.py.
"""
