"""
Unit Tests Package

Unit tests for pure and single-component logic:
- Metric calculator formulas and rounding
- Entity store query filters and aggregates
"""
