"""Pydantic schemas package.

Folder intent:
  common.py        — CamelModel base + HealthResponse (all schemas inherit CamelModel)
  account.py       — Registration, login and profile schemas
  application.py   — Submission, summary, detail and status-change schemas
  forms.py         — Department-specific form payload variants
"""
