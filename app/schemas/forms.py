"""Department-specific application form payloads.

Each department has its own variant; the ``department`` tag selects it.
Payloads arrive as a JSON string next to the uploaded documents and are
validated here before anything is written. The validated variant is
stored as a self-describing JSON document (tag included).
"""

from __future__ import annotations

import json
from typing import Annotated, Any, Literal, Union

from pydantic import ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationError
from app.domain.enums import Department
from app.schemas.common import CamelModel


class BaseForm(CamelModel):
    """Fields every department asks for. Unknown attributes are kept as-is."""

    model_config = ConfigDict(
        populate_by_name=True,
        alias_generator=to_camel,
        extra="allow",
        str_strip_whitespace=True,
    )

    project_name: str = Field(min_length=1)
    company_experience: str = Field(min_length=1)


class CivilForm(BaseForm):
    department: Literal[Department.CIVIL] = Department.CIVIL
    construction_type: str | None = None
    engineer_count: int | None = Field(default=None, ge=1)


class ElectricalForm(BaseForm):
    department: Literal[Department.ELECTRICAL] = Department.ELECTRICAL
    power_capacity: str | None = None
    high_voltage_certified: bool | None = None


class MechanicalForm(BaseForm):
    department: Literal[Department.MECHANICAL] = Department.MECHANICAL
    machinery_type: str | None = None
    maintenance_capability: str | None = None


FormPayload = Annotated[
    Union[CivilForm, ElectricalForm, MechanicalForm],
    Field(discriminator="department"),
]

_form_adapter: TypeAdapter[FormPayload] = TypeAdapter(FormPayload)


def parse_department(value: str | None) -> Department:
    if not value or not value.strip():
        raise ValidationError("Department is required")
    try:
        return Department(value.strip().lower())
    except ValueError:
        allowed = ", ".join(d.value for d in Department)
        raise ValidationError(f"Unknown department '{value}'. Expected one of: {allowed}") from None


def parse_form_payload(department: Department, payload: str | dict[str, Any] | None) -> BaseForm:
    """Validate a raw payload (JSON string or mapping) against the department's variant."""
    if isinstance(payload, str):
        if not payload.strip():
            raise ValidationError("Form data is required")
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError:
            raise ValidationError("Form data must be valid JSON") from None
    if not payload or not isinstance(payload, dict):
        raise ValidationError("Form data must be a non-empty JSON object")

    try:
        return _form_adapter.validate_python({**payload, "department": department})
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'][1:]) or 'formData'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(f"Invalid form data: {problems}") from None


def serialize_form(form: BaseForm) -> dict[str, Any]:
    """Storage representation: camelCase attributes plus the department tag."""
    return form.model_dump(mode="json", by_alias=True, exclude_none=True)
