"""
API Service for the Shrimp Farm Operations Platform

FastAPI-based REST API service providing endpoints for:
- Dashboard KPIs across a farm or the whole tenant
- Per-cycle production KPIs (survival, FCR, biomass, profit)
- Ponds overview with active cycle and latest water quality
- Health checks
"""
