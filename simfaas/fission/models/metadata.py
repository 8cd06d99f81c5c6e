"""
Object metadata model.

Body of /v2/getServiceForFunction requests.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ObjectMeta(BaseModel):
    """
    Only the function name is used; other metadata fields are ignored.

    JSON null, for the whole body or for the name, decodes to an empty name.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = ""

    @model_validator(mode="before")
    @classmethod
    def null_body_as_empty(cls, data: Any) -> Any:
        return {} if data is None else data

    @field_validator("name", mode="before")
    @classmethod
    def null_name_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value
