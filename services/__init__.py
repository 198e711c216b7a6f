"""
Services Package

This package contains the services of the Shrimp Farm Operations Platform:
- api: FastAPI REST API service (KPI reporting, health checks)
"""
