"""
Core utilities shared across the chat API.

This package hosts:
- configuration helpers (env vars, cost factors, timeouts)
- cross-cutting services such as logging, password hashing, bearer tokens,
  the error taxonomy and the timeout/retry guard around store calls.

Services and repositories depend on these primitives instead of reading
os.environ or talking to FastAPI directly.
"""
