"""
PromoterPro - Base model

Records are persisted with camelCase keys (also the backup wire format);
Python code works with snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        """Dict as stored in the repository"""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)
