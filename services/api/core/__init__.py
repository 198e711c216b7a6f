"""
Core Package

Cross-cutting infrastructure for the API service:
- Settings (pydantic-settings)
- Database engine and session management
- JWT bearer authentication
- Logging setup and application exceptions
"""
