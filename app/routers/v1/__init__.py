"""v1 router package — all /api/v1/* endpoints live here.

Files:
  auth.py          — registration, login, own profile
  applications.py  — submission and vendor/official reads
  official.py      — official-only listing and status changes

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to app/services/.
"""
