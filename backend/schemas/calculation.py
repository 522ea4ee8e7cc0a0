"""Data contracts for the two calculator use cases and saved calculations."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from backend.schemas.projection import ProjectionInput, ProjectionPoint, ProjectionSummary


class CalculationKind(str, Enum):
    STOCKS = "stocks"
    RETIREMENT = "retirement"


class StockParameters(BaseModel):
    """General investing inputs, named as the calculator form sends them."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    stockInitial: float = Field(10000.0, ge=0)
    stockMonthly: float = 500.0
    stockReturn: float = 8.0
    stockYears: int = Field(20, ge=0, le=100)

    def to_projection_input(self) -> ProjectionInput:
        return ProjectionInput(
            initial_amount=self.stockInitial,
            periodic_contribution=self.stockMonthly,
            annual_rate_percent=self.stockReturn,
            years=self.stockYears,
        )


class RetirementParameters(BaseModel):
    """Retirement planning inputs; the horizon is the years until retirement."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    retireInitial: float = Field(50000.0, ge=0)
    retireMonthly: float = 1000.0
    retireReturn: float = 7.0
    retireYears: int = Field(30, ge=0, le=100)
    currentAge: int = Field(35, ge=0, le=120)

    @property
    def retirement_age(self) -> int:
        return self.currentAge + self.retireYears

    def to_projection_input(self) -> ProjectionInput:
        return ProjectionInput(
            initial_amount=self.retireInitial,
            periodic_contribution=self.retireMonthly,
            annual_rate_percent=self.retireReturn,
            years=self.retireYears,
        )


CalculationParameters = Union[StockParameters, RetirementParameters]

PARAMETERS_BY_KIND: Dict[CalculationKind, Type[BaseModel]] = {
    CalculationKind.STOCKS: StockParameters,
    CalculationKind.RETIREMENT: RetirementParameters,
}


def parameters_for(kind: CalculationKind, raw: Optional[dict] = None) -> CalculationParameters:
    """Validate raw form values against the parameter model for ``kind``."""
    return PARAMETERS_BY_KIND[kind].model_validate(raw or {})


class CalculationResults(BaseModel):
    """Final-point figures stored with a saved calculation."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    finalBalance: float
    totalContributions: float
    totalEarnings: float


class CalculationCreate(BaseModel):
    """Payload for saving a calculation; results are recomputed when omitted."""

    model_config = ConfigDict(extra="forbid")

    kind: CalculationKind
    parameters: Dict[str, Any] = Field(default_factory=dict)
    results: Optional[CalculationResults] = None

    @model_validator(mode="after")
    def check_parameters(self) -> "CalculationCreate":
        # Normalise to the full parameter set for this kind so stored
        # records can always be loaded back into the form.
        params = parameters_for(self.kind, self.parameters)
        self.parameters = params.model_dump()
        return self


class SavedCalculation(BaseModel):
    id: int
    kind: CalculationKind
    parameters: Dict[str, Any]
    results: CalculationResults
    created_at: datetime


class CalculatorResponse(BaseModel):
    """Projection for one use case, echoing the parameters it was run with."""

    kind: CalculationKind
    parameters: Dict[str, Any]
    series: list[ProjectionPoint]
    summary: ProjectionSummary
    retirementAge: Optional[int] = None
