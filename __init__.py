"""
Shrimp Farm Operations Platform

Operations backend for multi-tenant shrimp aquaculture.

This package provides:
- REST API service exposing farm, pond and production-cycle KPIs
- Metric calculation over stocking, mortality, feeding and harvest logs
- Financial roll-ups from production costs, operational costs and revenue
"""
