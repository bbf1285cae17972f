from pydantic import BaseModel, Field, StringConstraints
from typing import Annotated, Optional
from datetime import datetime


CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=80)]
ProductName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=120)]


class CategoryCreate(BaseModel):
    name: CategoryName
    description: Optional[str] = None
    image_url: Optional[str] = None


# name may be omitted on update but never set to null
class CategoryUpdate(BaseModel):
    name: CategoryName = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductCreate(BaseModel):
    name: ProductName
    description: Optional[str] = None

    price: float = Field(..., gt=0, allow_inf_nan=False)

    category_id: Optional[str] = None
    image_url: Optional[str] = None


class ProductUpdate(BaseModel):
    name: ProductName = None
    description: Optional[str] = None
    price: float = Field(None, gt=0, allow_inf_nan=False)
    category_id: Optional[str] = None
    image_url: Optional[str] = None


class ProductInDB(BaseModel):
    id: str
    name: str
    description: Optional[str]

    price: float = Field(..., allow_inf_nan=False)

    category_id: Optional[str]
    image_url: Optional[str]

    created_at: datetime
    updated_at: datetime
