"""Base schema classes with camelCase aliases.

Python code stays snake_case; JSON on the wire is camelCase.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request bodies. Accepts camelCase or snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CamelORMModel(BaseModel):
    """Responses. Reads ORM objects, outputs camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
