"""Leave Portal package.

This package is organized by feature modules (employees, entitlement, blackouts,
routing, leaves, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
