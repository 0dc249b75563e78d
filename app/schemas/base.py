# app/schemas/base.py
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """JSON uses camelCase; Python code and ORM rows use snake_case. Both are accepted on input."""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


def not_null(v):
    """PATCH bodies may omit a required column but may not clear it."""
    if v is None:
        raise ValueError("field may be omitted but not set to null")
    return v
