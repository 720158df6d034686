from typing import List

from pydantic import BaseModel, Field


class VideoAsset(BaseModel):
    """A video clip received from the caller, held in memory for one request."""

    content: bytes = Field(..., repr=False)
    mime_type: str = Field(default="video/mp4")
    filename: str = Field(default="video.mp4")


class UploadedFile(BaseModel):
    """Reference to a clip stored by the Gemini Files API."""

    uri: str
    name: str
    mime_type: str


class TranscriptionResult(BaseModel):
    """One description + transcript string per video, in upload order."""

    transcripts: List[str]
