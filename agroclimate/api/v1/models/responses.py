"""
API response models using Pydantic.
"""
from pydantic import BaseModel, Field


class CurrentSeasonResponse(BaseModel):
    """Response model for the current season endpoint."""
    season: str = Field(
        description="Agricultural season for today's date",
        examples=["kharif"]
    )
    month: int = Field(
        description="0-based month index used for the lookup",
        examples=[6]
    )


class ErrorResponse(BaseModel):
    """Error body returned by the global error handler."""
    error: str
    detail: str

    class Config:
        json_schema_extra = {
            "example": {
                "error": "Invalid farm context",
                "detail": "Farm location coordinates are required for risk assessment",
            }
        }
