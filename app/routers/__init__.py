"""Routers package — HTTP endpoint definitions.

Files:
  v1/auth.py          — registration, login, own profile
  v1/applications.py  — submission, own listing, detail, document download
  v1/official.py      — cross-vendor listing and status review
"""
