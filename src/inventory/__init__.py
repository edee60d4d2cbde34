"""Product inventory microservice.

CRUD over products with soft delete, paged search and stock queries,
served by FastAPI on top of SQLModel, plus orchestrator health probes.
"""

__version__ = "1.0.0"
