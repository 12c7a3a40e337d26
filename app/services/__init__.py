"""Services package — all business logic lives here, never in routers.

Files:
  account.py         — identity store: registration, login, identity resolution
  document_stage.py  — writes uploads to storage with all-or-nothing cleanup
  submission.py      — application submission (stage + single transaction)
  visibility.py      — who may read which applications
  status.py          — review status transitions

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
