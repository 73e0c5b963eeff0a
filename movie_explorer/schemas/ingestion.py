# movie_explorer/schemas/ingestion.py

from pydantic import BaseModel, Field


class IngestionReport(BaseModel):
    """Outcome of one pipeline run"""

    requested: int = Field(default=0, description="Movies selected from discover pages")
    stored: int = Field(default=0, description="Movies whose transaction committed")
    failed: int = Field(default=0, description="Movies rolled back")
    skipped: int = Field(default=0, description="Movies not fetched before the deadline")
    used_fallback: bool = Field(default=False, description="Discover listing came from fallback data")
    timed_out: bool = Field(default=False, description="Detail fan-out hit the deadline")
