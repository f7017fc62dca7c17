from pydantic import BaseModel, ConfigDict


class RegisterResponse(BaseModel):
    """Public view of a registered user; the password hash is never included."""

    id: int
    username: str
    nim: str

    model_config = ConfigDict(from_attributes=True)
