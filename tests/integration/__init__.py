"""
Integration Tests Package

Integration tests through the HTTP surface:
- KPI endpoints against a seeded database
- Authentication and error envelopes
- Health check
"""
