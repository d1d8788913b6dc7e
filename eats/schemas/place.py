"""
Eats Server: Pydantic Request/Response Schemas
=================================================

What:  Pydantic models defining the JSON contract of the HTTP API.
How:   FastAPI validates request bodies against the input models and
       serializes ORM rows through the response models.

Wire format of a place:
    {"id": 1, "name": "...", "budget": 12, "location": "...", "mood": "...",
     "cuisine": "...", "mealtime": "...", "rating": 1, "approved": false}

Input models are strict: a number sent as a string, a bool or a float in an
integer field is rejected rather than coerced. They ignore unknown keys, so
a client-sent `id` or `approved` is silently dropped: ids come from the
store (or the URL path) and the moderation flag only changes through
approve/disapprove.
"""

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PlaceIn(BaseModel):
    """Body of POST /places and PUT /places/{id}. Every field is required."""

    model_config = ConfigDict(extra="ignore", strict=True)

    name: str = Field(description="Venue name")
    budget: int = Field(description="Expected spend")
    location: str = Field(description="Where the venue is")
    mood: str = Field(description="Occasion or vibe, e.g. 'date night'")
    cuisine: str = Field(description="Kind of food served")
    mealtime: str = Field(description="Breakfast, lunch, dinner, ...")
    rating: int = Field(description="Submitter's rating")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PlaceResponse(BaseModel):
    """Full representation of a stored place."""

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(description="Server-assigned identifier")
    name: str
    budget: int
    location: str
    mood: str
    cuisine: str
    mealtime: str
    rating: int
    approved: bool = Field(description="Moderation state; false while requested")


class ResultResponse(BaseModel):
    """Small status object, e.g. {"result": "success"}."""

    result: str


class HealthResponse(BaseModel):
    """Static liveness payload returned by GET /health."""

    result: str = Field(default="Server is up and running")


class ErrorResponse(BaseModel):
    """
    Every error the API returns has exactly this shape.

    Example:
        {"error": "Place not found"}
    """

    error: str = Field(description="Human-readable error message")
