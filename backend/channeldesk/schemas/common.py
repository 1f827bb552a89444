from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class Envelope(CamelModel):
    """Base success envelope."""

    success: bool = True
    message: str | None = None


class MessageResponse(Envelope):
    """Envelope carrying only a message."""

    pass
