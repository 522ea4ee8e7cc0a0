"""Data contracts for the projection engine."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProjectionInput(BaseModel):
    """Inputs required to compute a projection series."""

    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    initial_amount: float = Field(..., ge=0, description="Starting principal at year 0.")
    periodic_contribution: float = Field(
        0.0,
        description="Amount deposited after growth in each monthly sub-period. Negative values are withdrawals.",
    )
    annual_rate_percent: float = Field(
        ...,
        description="Nominal annual return expressed as a percentage (e.g. 8 for 8%).",
    )
    years: int = Field(..., ge=0, le=100, description="Number of years to project.")


class ProjectionPoint(BaseModel):
    """Single yearly sample of a projection series."""

    model_config = ConfigDict(frozen=True)

    year: int
    balance: float
    contributions: float
    earnings: float


class ProjectionSummary(BaseModel):
    """Final-point figures plus ROI, as shown next to the chart."""

    finalBalance: float
    totalContributions: float
    totalEarnings: float
    # None when contributions are zero and the ratio is not finite.
    roiPercent: Optional[float] = None
    roiDisplay: Optional[str] = None


class ProjectionResponse(BaseModel):
    series: List[ProjectionPoint]
    summary: ProjectionSummary
