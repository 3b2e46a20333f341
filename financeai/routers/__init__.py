"""
FastAPI routers grouped by domain (blogs, AI tools, newsletter, users, market).

Each module exposes an APIRouter included by ``financeai.app.create_app``.
Services are read from ``app.state`` so tests can swap collaborators.
"""
