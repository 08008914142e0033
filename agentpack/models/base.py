"""Shared base for configuration models.

Python attributes are snake_case; the wire format and the files on disk use
camelCase, matching what the admin UI sends.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Dump to a JSON-ready dict using wire names, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StoredRecord(CamelModel):
    """Fields the entity store assigns to every persisted record."""

    id: str
    created_at: str
    updated_at: str
