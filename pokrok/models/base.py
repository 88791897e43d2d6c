"""Shared model configuration."""
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PartialUpdate(CamelModel):
    """
    Base for PATCH bodies where every field is optional.

    Only fields listed in ``clearable_fields`` may be sent as an explicit
    null; a null for any other field is a validation error.
    """

    clearable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_required_fields(self):
        for field in sorted(self.model_fields_set):
            if getattr(self, field) is None and field not in self.clearable_fields:
                raise ValueError(f"{to_camel(field)} cannot be null")
        return self
