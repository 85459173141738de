# File: lms/schemas/base.py

from typing import Annotated

from pydantic import AfterValidator, BaseModel, StringConstraints
from pydantic.alias_generators import to_camel

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _reject_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


# Kept verbatim: surrounding spaces are part of the secret.
PasswordStr = Annotated[str, StringConstraints(min_length=1), AfterValidator(_reject_blank)]


class CamelModel(BaseModel):
    """
    camelCase on the wire (``firstName``, ``totalCopies``), snake_case in Python.
    Input accepts either spelling.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True  # Pydantic v2: replaces orm_mode
