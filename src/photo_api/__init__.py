"""Photo API — photos owned by authenticated users.

A small FastAPI service: bearer-token authentication in front of
list/get/create endpoints for photos, backed by SQLAlchemy.
"""

__version__ = "0.1.0"
