# Services package init
"""
Arboriza Backend - Services Layer
==================================

What:  Request validation and store access, independent of HTTP concerns.
How:   Each service is a stateless singleton; routes pass in the request's
       AsyncSession (or the Database, for concurrent lookups). Services raise
       the exceptions from arboriza.exceptions and never build responses.

Service Inventory:
    - AuthService:    registration and login
    - PlantService:   plant list and registration
    - CommentService: per-plant comment threads
    - SpeciesService: species search and filter values
    - ForumService:   rooms, membership and messages
"""
