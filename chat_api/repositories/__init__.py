"""
Persistence adapters.

The member and room stores live in SQL (SQLAlchemy asyncio); the credential
cache lives in Redis. Services depend on these classes rather than on sessions
or Redis clients directly.
"""
