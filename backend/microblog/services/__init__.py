# Services package init
"""
Microblog Backend: Services Layer
=====================================

What:  Storage access sitting between routes (HTTP) and MongoDB.

Service Inventory:
    - PostRepository: insert, list-all, update-by-id, delete-by-id for posts

Why the repository is separate from routes:
    1. Testability: it is unit-tested against a mocked collection
    2. Replaceability: route tests swap it for an in-memory double
    3. Driver errors are translated once, not in every handler
"""
