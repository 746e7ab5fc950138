"""
Microblog Backend: Application Package Initializer
===================================================

What: Marks the `microblog` directory as a Python package.
Why:  Enables module imports like `from microblog.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows the same thin layered layout for its single entity:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP status codes, outcome logging
    ├─────────────────────────────────────┤
    │     Services (Post Repository)      │  ← One MongoDB call per operation
    ├─────────────────────────────────────┤
    │           Schemas (Data)            │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │     Database (MongoDB client)       │  ← Built once per process, injected
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
