"""
FastAPI routers grouped by domain (records, data, auth, dashboard).

Each module exposes an APIRouter included by portal.app.create_app. Services
are looked up on ``request.app.state`` so every app instance owns its own
store.
"""
