"""
Shared pydantic base class for wire schemas.

Python code uses snake_case field names; JSON bodies use camelCase keys.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to and accepting camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
