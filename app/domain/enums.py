"""Closed enumerations shared by models, schemas and services."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    VENDOR = "vendor"
    OFFICIAL = "official"


class Department(str, Enum):
    CIVIL = "civil"
    ELECTRICAL = "electrical"
    MECHANICAL = "mechanical"


class ApplicationStatus(str, Enum):
    """Persisted review states. Values are the stable wire contract."""

    PENDING_VERIFICATION = "PendingVerification"
    CLARIFICATION_REQUESTED = "ClarificationRequested"
    APPROVED = "Approved"
    REJECTED = "Rejected"
