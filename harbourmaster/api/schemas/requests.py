"""
Request schemas for the API.

Transcript fields are optional at the schema level so that a missing or
blank transcript reaches the pipeline and is reported as ``missing_input``
with the uniform error body, instead of a framework validation error.
"""

from typing import Optional

from pydantic import BaseModel, Field

from harbourmaster.models import ReviewStatus, Shape


class IngestRequest(BaseModel):
    """A transcript to ingest."""
    transcript: Optional[str] = Field(None, description="Transcribed speech")
    harbour_name: Optional[str] = Field(None, description="Harbour-name hint")
    row_id: Optional[str] = Field(None, description="External tracking id")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "transcript": "TIER: PRO. Question: how do I approach Vathi at night? "
                                  "Answer: 1. Keep the red light to port. 2. Anchor in 5m.",
                    "harbour_name": "Vathi",
                    "row_id": "row-123",
                }
            ]
        }
    }


class EmbedRequest(BaseModel):
    """Re-trigger the embedding of an existing row."""
    shape: Shape = Field(..., description="Table of the row")
    id: str = Field(..., min_length=1, description="Row id")


class ReviewStatusUpdate(BaseModel):
    """Move a review item along its lifecycle."""
    status: ReviewStatus


class ResubmitRequest(BaseModel):
    """Corrected transcript for a parked review item."""
    transcript: Optional[str] = Field(None, description="Corrected transcript")
    harbour_name: Optional[str] = None
    row_id: Optional[str] = None
