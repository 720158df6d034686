import pytest
from pydantic import ValidationError

from scriptengine.client.state import (
    EngineState,
    copy_script,
    select_variation,
    set_api_key,
    set_clip,
    set_product_link,
    set_video,
)
from scriptengine.scripting.models import ScriptMode, ScriptVariation


@pytest.fixture
def with_scripts():
    return EngineState(
        scripts=(
            ScriptVariation(mode=ScriptMode.STRICT, script="strict script"),
            ScriptVariation(mode=ScriptMode.AI_OPTIMIZED, script="optimized script"),
        )
    )


def test_defaults():
    state = EngineState()
    assert state.video_files == (None, None, None)
    assert state.clips == ("", "", "")
    assert state.scripts is None
    assert not state.processing_videos and not state.loading


def test_state_is_immutable():
    state = EngineState()
    with pytest.raises(ValidationError):
        state.product_link = "x"


def test_transitions_return_new_state():
    state = EngineState()
    updated = set_product_link(set_api_key(state, "key"), "https://example.com/p")

    assert updated is not state
    assert state.gemini_api_key == ""
    assert updated.gemini_api_key == "key"
    assert updated.product_link == "https://example.com/p"


def test_video_slots():
    state = set_video(EngineState(), 2, "/tmp/c.mp4")
    assert state.video_files == (None, None, "/tmp/c.mp4")
    assert state.selected_videos() == ["/tmp/c.mp4"]

    with pytest.raises(IndexError):
        set_video(state, 3, "/tmp/d.mp4")


def test_clip_edit_and_filled_clips():
    state = set_clip(set_clip(EngineState(), 0, "hello"), 2, "world")
    assert state.clips == ("hello", "", "world")
    assert state.filled_clips() == ["hello", "world"]


def test_select_variation_bounds(with_scripts):
    assert select_variation(with_scripts, 1).selected_variation == 1
    assert select_variation(with_scripts, 2) is with_scripts
    assert select_variation(with_scripts, -1) is with_scripts
    assert select_variation(EngineState(), 0) == EngineState()


def test_copy_selected_script(with_scripts):
    state, text = copy_script(select_variation(with_scripts, 1))
    assert text == "optimized script"
    assert state.notice

    untouched, nothing = copy_script(EngineState())
    assert nothing is None
    assert untouched == EngineState()
