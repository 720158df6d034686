from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from scriptengine.scripting.models import ScriptVariation

VIDEO_SLOTS = 3


class EngineState(BaseModel):
    """
    Everything the form holds between calls.

    The model is frozen; every transition returns a new instance.
    """

    model_config = ConfigDict(frozen=True)

    gemini_api_key: str = ""
    video_files: Tuple[Optional[str], ...] = Field(default=(None,) * VIDEO_SLOTS)
    clips: Tuple[str, ...] = Field(default=("",) * VIDEO_SLOTS)
    product_link: str = ""
    processing_videos: bool = False
    loading: bool = False
    scripts: Optional[Tuple[ScriptVariation, ...]] = None
    selected_variation: int = 0
    error: str = ""
    notice: str = ""

    def selected_videos(self) -> List[str]:
        return [path for path in self.video_files if path is not None]

    def filled_clips(self) -> List[str]:
        return [clip for clip in self.clips if clip.strip()]

    def selected_script(self) -> Optional[ScriptVariation]:
        if self.scripts and 0 <= self.selected_variation < len(self.scripts):
            return self.scripts[self.selected_variation]
        return None


def set_api_key(state: EngineState, api_key: str) -> EngineState:
    return state.model_copy(update={"gemini_api_key": api_key})


def set_video(state: EngineState, slot: int, path: Optional[str]) -> EngineState:
    if not 0 <= slot < len(state.video_files):
        raise IndexError(f"Video slot {slot} out of range")
    files = list(state.video_files)
    files[slot] = path
    return state.model_copy(update={"video_files": tuple(files)})


def set_clip(state: EngineState, index: int, text: str) -> EngineState:
    if not 0 <= index < len(state.clips):
        raise IndexError(f"Clip {index} out of range")
    clips = list(state.clips)
    clips[index] = text
    return state.model_copy(update={"clips": tuple(clips)})


def set_product_link(state: EngineState, product_link: str) -> EngineState:
    return state.model_copy(update={"product_link": product_link})


def select_variation(state: EngineState, index: int) -> EngineState:
    """Out of range selections are ignored."""
    if not state.scripts or not 0 <= index < len(state.scripts):
        return state
    return state.model_copy(update={"selected_variation": index})


def copy_script(state: EngineState) -> Tuple[EngineState, Optional[str]]:
    """Returns the selected script's text for the caller to put wherever it copies to."""
    variation = state.selected_script()
    if variation is None:
        return state, None
    return state.model_copy(update={"notice": "Script copied!"}), variation.script
