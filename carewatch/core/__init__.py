"""
Core domain layer: scoring, validation, visits and reports.
"""
