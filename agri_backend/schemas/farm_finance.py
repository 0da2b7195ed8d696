"""
Pydantic schemas for the /farm-finance endpoint.

A farm finance record holds one user's expense sheet plus the yield/price
prediction and profit figures the frontend computed from it. The backend
persists the derived figures as supplied; it never recomputes them.

Wire names are snake_case at record level and camelCase `isRequired`
inside an expense category, matching what the frontend sends.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# --- Expense line items ---

class ExpenseCategory(BaseModel):
    """
    A fixed expense line (seeds, fertilizer, labour, ...).

    Required categories are the mandatory cost lines every farm sheet shows.
    """
    id: str = Field(..., description="Client-generated line id")
    name: str = Field(..., description="Category display name", examples=["Seeds"])
    amount: float = Field(..., ge=0, description="Amount spent (non-negative)")
    is_required: bool = Field(
        False,
        alias="isRequired",
        description="Whether this is a mandatory cost line",
    )

    model_config = {
        "populate_by_name": True,
        "extra": "allow",
    }


class OtherExpense(BaseModel):
    """A free-form extra expense line added by the user."""
    id: str = Field(..., description="Client-generated line id")
    name: str = Field(..., description="Expense description")
    amount: float = Field(..., ge=0, description="Amount spent (non-negative)")

    model_config = {"extra": "allow"}


# --- Upsert request ---

class FarmFinanceUpsertRequest(BaseModel):
    """
    Request body for PUT /farm-finance.

    Only expense_categories is required. PUT is a full replace: any optional
    field left out is written as null, except the four fields that carry
    defaults (other_expenses, total_expense, yield_unit, price_unit) which
    the service fills in.
    """
    expense_categories: List[ExpenseCategory] = Field(
        ...,
        description="Ordered expense categories (must be a JSON array)"
    )
    other_expenses: Optional[List[OtherExpense]] = Field(
        None,
        description="Ordered extra expenses (defaults to [])"
    )
    total_expense: Optional[float] = Field(
        None,
        description="Sum of all expense amounts as computed by the client (defaults to 0)"
    )
    predicted_yield: Optional[float] = Field(None, description="Predicted harvest quantity")
    yield_unit: Optional[str] = Field(None, description="Unit of predicted_yield (defaults to 'kg')")
    predicted_price: Optional[float] = Field(None, description="Predicted market price")
    price_unit: Optional[str] = Field(None, description="Unit of predicted_price (defaults to 'per kg')")
    crop_type: Optional[str] = Field(None, description="Crop the sheet is for", examples=["rice"])
    expected_revenue: Optional[float] = Field(None, description="Caller-computed revenue")
    net_profit_loss: Optional[float] = Field(None, description="Caller-computed profit (negative = loss)")
    profit_loss_percentage: Optional[float] = Field(None, description="Caller-computed profit %")
    break_even_price: Optional[float] = Field(None, description="Caller-computed break-even price")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "expense_categories": [
                        {"id": "1", "name": "Seeds", "amount": 100, "isRequired": True}
                    ],
                    "other_expenses": [],
                    "total_expense": 100
                }
            ]
        }
    }


# --- Response models ---

class FarmFinanceRecord(BaseModel):
    """A persisted farm finance record as stored in farm_finances."""
    id: Optional[str] = Field(None, description="Record UUID")
    user_id: str = Field(..., description="Owner user UUID (from the verified token)")
    expense_categories: List[ExpenseCategory] = Field(default_factory=list)
    other_expenses: List[OtherExpense] = Field(default_factory=list)
    total_expense: float = Field(0, description="Stored total, not checked against the lines")
    predicted_yield: Optional[float] = None
    yield_unit: Optional[str] = None
    predicted_price: Optional[float] = None
    price_unit: Optional[str] = None
    crop_type: Optional[str] = None
    expected_revenue: Optional[float] = None
    net_profit_loss: Optional[float] = None
    profit_loss_percentage: Optional[float] = None
    break_even_price: Optional[float] = None
    created_at: Optional[str] = Field(None, description="ISO-8601 timestamp when created")
    updated_at: Optional[str] = Field(None, description="ISO-8601 timestamp of last update")


class FarmFinanceFetchResponse(BaseModel):
    """Response for GET /farm-finance. `data` is null until the first save."""
    data: Optional[FarmFinanceRecord] = Field(None, description="The user's record, if any")
    exists: bool = Field(..., description="Whether a record exists for the user")


class FarmFinanceSaveResponse(BaseModel):
    """Response for PUT /farm-finance."""
    data: FarmFinanceRecord = Field(..., description="The persisted record")
    message: str = Field(
        ...,
        description="Whether the record was created or updated",
        examples=["Finance data created", "Finance data updated"]
    )


class FarmFinanceDeleteResponse(BaseModel):
    """Response for DELETE /farm-finance."""
    message: str = Field("Finance data deleted", description="Success message")
