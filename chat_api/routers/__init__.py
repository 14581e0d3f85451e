"""
FastAPI routers grouped by domain (member, rooms).

Each file inside this package exposes an APIRouter that is included in the main
application (app.py). Routers stay thin: they unpack requests, call a service
and wrap the result in the response envelope.
"""
