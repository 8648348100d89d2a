"""
Application layer - Use cases and orchestration for Secure Estate.

This layer contains:
- Application services (well-being commands, sweep, admin monitoring)
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, api
"""
