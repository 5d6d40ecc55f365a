"""
Shared Kernel

Base classes and utilities shared across the booking, listing and review
contexts: domain building blocks, the error taxonomy, the unit of work and
the API-level exception handler.
"""
