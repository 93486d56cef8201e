"""
Pydantic Schemas for Request/Response Validation

Also owns the storage codec for cart lines: flows work with typed
`CartLine` lists and only the JSON text in `items_json` crosses the
store boundary.
"""

import json
from datetime import datetime
from typing import Annotated, Any, Optional, List, Dict

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    TypeAdapter,
)


# Non-empty after trimming surrounding whitespace
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Largest amount a Numeric(10, 2) column holds
MAX_AMOUNT = 99_999_999.99


# =============================================================================
# CART LINES
# =============================================================================

class CartLine(BaseModel):
    """Single (item, quantity, price) entry of a checkout."""
    item_id: int = Field(..., examples=[1])
    quantity: int = Field(..., ge=1, examples=[2])
    unit_price: float = Field(
        ...,
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("unit_price", "price"),
        examples=[5.0],
    )


_cart_lines = TypeAdapter(List[CartLine])


def encode_cart_lines(lines: List[CartLine]) -> str:
    """Serialize cart lines for the `items_json` column."""
    return _cart_lines.dump_json(lines).decode("utf-8")


def decode_cart_lines(raw: Optional[str]) -> List[CartLine]:
    """
    Parse the `items_json` column back into cart lines.

    Raises:
        ValueError: If the stored text is missing or not a valid line array
    """
    if raw is None:
        raise ValueError("items_json is empty")
    return _cart_lines.validate_json(raw)


def encode_details(details: Optional[Dict[str, Any]]) -> Optional[str]:
    """Serialize order details for the `details_json` column."""
    if details is None:
        return None
    return json.dumps(details, ensure_ascii=False)


def decode_details(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse the `details_json` column.

    Raises:
        ValueError: If the stored text is not a JSON object
    """
    if raw is None:
        return None
    details = json.loads(raw)
    if not isinstance(details, dict):
        raise ValueError("details_json is not an object")
    return details


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RegisterRequest(BaseModel):
    """Request schema for account creation."""
    email: RequiredText = Field(..., examples=["ana@example.com"])
    password: str = Field(..., min_length=1)
    name: RequiredText = Field(
        ...,
        validation_alias=AliasChoices("name", "nome"),
        examples=["Ana Souza"],
    )
    phone: Optional[str] = Field(
        None,
        max_length=20,
        validation_alias=AliasChoices("phone", "telefone"),
        examples=["11 99999-0000"],
    )


class LoginRequest(BaseModel):
    """Request schema for password login."""
    email: RequiredText
    password: str = Field(..., min_length=1)


class OrderCreate(BaseModel):
    """Request schema for submitting a cart as an order."""
    items: List[CartLine] = Field(..., min_length=1)
    total: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False, examples=[10.0])
    details: Dict[str, Any] = Field(..., min_length=1, examples=[{"observacao": "Sem cebola"}])


class FinalizeOrderCreate(BaseModel):
    """Request schema for checkout with delivery details."""
    name: RequiredText = Field(..., max_length=100)
    phone: RequiredText = Field(..., max_length=20)
    address: RequiredText = Field(..., max_length=255)
    payment: RequiredText = Field(
        ...,
        max_length=50,
        validation_alias=AliasChoices("payment", "payment_method"),
        examples=["pix", "cartao", "dinheiro"],
    )
    notes: Optional[str] = Field(None, max_length=500)
    items: List[CartLine] = Field(..., min_length=1)
    total: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class SessionResponse(BaseModel):
    """Response carrying a freshly issued session token."""
    message: str
    token: str


class MenuItemResponse(BaseModel):
    """A single menu row."""
    id: int
    name: str
    description: Optional[str] = None
    price: float
    category: Optional[str] = None
    image_url: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class OrderResponse(BaseModel):
    """Stored order with its cart lines decoded."""
    id: int
    user_id: str
    items: List[CartLine]
    details: Optional[Dict[str, Any]] = None
    total: float
    status: str
    created_at: Optional[datetime] = None


class FinalizedOrderResponse(BaseModel):
    """Stored checkout with delivery details."""
    id: int
    user_id: str
    name: str
    phone: str
    address: str
    payment_method: str
    notes: Optional[str] = None
    items: List[CartLine]
    total: float
    created_at: Optional[datetime] = None


class OrderCreateResponse(BaseModel):
    """Response after successfully creating an order."""
    message: str
    order: OrderResponse


class FinalizedOrderCreateResponse(BaseModel):
    """Response after successfully finalizing a checkout."""
    message: str
    order: FinalizedOrderResponse


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    code: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    auth_service: str
    store: str
    timestamp: datetime
