"""
Infrastructure layer - Adapters for Secure Estate.

This layer contains:
- Adapters implementing application ports (PostgreSQL, webhook, clock, lock)
- In-memory stubs for development and tests
- Observability (structured logging, correlation IDs)

IMPORT RULES:
- CAN import from: domain, application
- CANNOT import from: api
"""
