from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ScriptMode(str, Enum):
    """Ordering policy for the clips inside a generated script."""

    STRICT = "STRICT"
    AI_OPTIMIZED = "AI_OPTIMIZED"


class ScriptRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    clips: List[str] = Field(..., max_length=3, description="Clip transcripts, in the order the caller wants them")
    product_link: str = Field(..., alias="productLink")
    mode: ScriptMode = Field(default=ScriptMode.STRICT)

    def filled_clips(self) -> List[str]:
        return [clip for clip in self.clips if clip.strip()]


class ScriptVariation(BaseModel):
    """One generated script, tagged with the mode that produced it."""

    mode: ScriptMode
    script: str
