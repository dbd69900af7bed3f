"""Base models for obs-tool."""

import typing
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


def _is_list_annotation(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    if origin is list:
        return True
    if origin is typing.Union:
        return any(_is_list_annotation(arg) for arg in typing.get_args(annotation) if arg is not type(None))
    return False


class ObsToolBaseModel(BaseModel):
    """Base model for options and domain objects built by callers."""

    model_config = ConfigDict(
        extra="forbid",  # Don't allow extra fields
        frozen=False,
        validate_assignment=True,  # Validate on attribute assignment
    )


class ObsBaseModel(BaseModel):
    """
    Base model for documents decoded from OBS XML.

    A child element that appears once is decoded as a single value; fields
    declared as lists get it wrapped so ``<entry/>`` and ``<entry/><entry/>``
    validate the same way.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_children(cls, data: Any) -> Any:
        # An empty element such as <disable/> decodes to ""
        if data == "":
            return {}
        if not isinstance(data, dict):
            return data
        for name, field in cls.model_fields.items():
            key = field.alias or name
            if key in data and _is_list_annotation(field.annotation) and not isinstance(data[key], list):
                data = {**data, key: [data[key]]}
        return data


__all__ = ["ObsToolBaseModel", "ObsBaseModel"]
