from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire (either accepted on input)"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    message: str


def first_error_message(exc) -> str:
    """Human readable text for the first error of a pydantic ValidationError"""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    message = error.get("msg", "Invalid value")
    # "Value error, ..." prefix comes from ValueError raised in validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    if location and error.get("type") != "value_error":
        return f"{'.'.join(location)}: {message}"
    return message
