"""Shared response schemas"""

from pydantic import BaseModel, ConfigDict, PlainSerializer
from typing import Annotated, Generic, List, Optional, TypeVar
from decimal import Decimal

T = TypeVar("T")

# Money leaves the API as a JSON number rounded to cents
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: float(round(v, 2)), return_type=float, when_used="json"),
]

class BaseSchema(BaseModel):
    """Base schema reading ORM attributes"""

    model_config = ConfigDict(from_attributes=True)

class APIResponse(BaseModel, Generic[T]):
    """Success envelope returned by every endpoint"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None

class Page(BaseModel, Generic[T]):
    """One page of a listing"""

    items: List[T]
    total: int
    page: int
    limit: int
    pages: int
