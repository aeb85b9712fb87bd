from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema base speaking camelCase on the wire (`imageUrl`, `createdAt`).

    snake_case field names are accepted on input as well.
    """

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
