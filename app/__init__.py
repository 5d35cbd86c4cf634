"""
Books API Application Package

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: Database handle (engine, sessions) and the get_db dependency
- exceptions.py: Errors the API turns into 400/404 responses
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions (session, store, auth, body)
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Persistence gateway, validation, security, rate limiting
"""

__version__ = "0.1.0"
