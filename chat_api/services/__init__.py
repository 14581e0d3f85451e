"""
High-level use cases for the chat API.

Each service module orchestrates repositories/adapters to implement business
rules (register a member, log in, change a password, join or delete a room).

Routers (FastAPI endpoints) call these services instead of manipulating the
database, the cache or tokens directly.
"""
