"""Base classes shared by all DTO schemas.

DTOs travel as camelCase JSON (``timeZone``, ``folderLocked``...) and accept
either camelCase or snake_case on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for DTOs serialized with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
