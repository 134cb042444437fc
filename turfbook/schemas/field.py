from pydantic import BaseModel, ConfigDict


class FieldStatusResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id_field: int
    field_name: str
    status: str


__all__ = ["FieldStatusResponse"]
