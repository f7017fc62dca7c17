from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Success wrapper shared by every endpoint."""

    error: bool = False
    message: Optional[str] = None
    data: DataT
