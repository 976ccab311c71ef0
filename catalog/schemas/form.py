from pydantic import BaseModel


# A single rule violation reported back to the form
class FieldError(BaseModel):
    field: str
    message: str
