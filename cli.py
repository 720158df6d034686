import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from scriptengine.client.orchestrator import ScriptEngineClient
from scriptengine.client.state import (
    VIDEO_SLOTS,
    EngineState,
    copy_script,
    select_variation,
    set_api_key,
    set_clip,
    set_product_link,
    set_video,
)
from scriptengine.config_manager import AppConfig, ConfigManager
from scriptengine.utils.logger import setup_logger

VARIATION_LABELS = ["Your Vision (clips in your exact order)", "AI Optimized (AI picks best clip order)"]


def load_config(path: str) -> ConfigManager:
    try:
        return ConfigManager(config_path=path)
    except FileNotFoundError as e:
        logger.warning(f"{e}. Using default settings.")
        return ConfigManager.from_config(AppConfig())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Viral Script Engine CLI")
    parser.add_argument("--config", default="config/settings.yaml", help="Path to settings.yaml")
    parser.add_argument("--api-url", help="Backend URL (overrides config)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP backend")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Listening port")

    transcribe_parser = subparsers.add_parser("transcribe", help="Transcribe up to 3 video clips")
    transcribe_parser.add_argument("videos", nargs="+", help="Video files")
    transcribe_parser.add_argument("--gemini-key", required=True, help="Gemini API key")

    scripts_parser = subparsers.add_parser("scripts", help="Generate both script variations from transcripts")
    scripts_parser.add_argument("--clip", action="append", default=[], help="Clip transcript (repeat 2-3 times)")
    scripts_parser.add_argument("--product", required=True, help="Product link")
    _add_output_args(scripts_parser)

    run_parser = subparsers.add_parser("run", help="Transcribe videos then generate both variations")
    run_parser.add_argument("videos", nargs="+", help="Video files")
    run_parser.add_argument("--gemini-key", required=True, help="Gemini API key")
    run_parser.add_argument("--product", required=True, help="Product link")
    _add_output_args(run_parser)

    return parser


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--select", type=int, default=0, help="Variation to copy (0=strict, 1=AI optimized)")
    parser.add_argument("--output", help="Write the selected script to this file")


def _fail(message: str) -> None:
    print(message)
    sys.exit(1)


def _with_videos(state: EngineState, videos: List[str]) -> EngineState:
    if len(videos) > VIDEO_SLOTS:
        _fail(f"Error: at most {VIDEO_SLOTS} videos are supported.")
    for slot, path in enumerate(videos):
        state = set_video(state, slot, path)
    return state


def _log_progress(state: EngineState) -> None:
    if state.processing_videos:
        logger.info("Processing videos, this takes a few seconds per clip...")
    if state.loading:
        logger.info("Generating script variations...")


def _print_transcripts(state: EngineState) -> None:
    for index, clip in enumerate(state.clips):
        print(f"--- Clip {index + 1} ---")
        print(clip)
        print()


def _print_scripts(state: EngineState, output: Optional[str]) -> None:
    for index, variation in enumerate(state.scripts or ()):
        print(f"=== {VARIATION_LABELS[index]} [{variation.mode.value}] ===")
        print(variation.script)
        print()

    state, text = copy_script(state)
    if text is not None and output:
        Path(output).write_text(text)
        print(f"Variation {state.selected_variation} written to {output}")


async def _transcribe(client: ScriptEngineClient, state: EngineState) -> EngineState:
    state = await client.process_videos(state, on_change=_log_progress)
    if state.error:
        _fail(state.error)
    return state


async def _generate(client: ScriptEngineClient, state: EngineState, select: int) -> EngineState:
    state = await client.generate_all_variations(state, on_change=_log_progress)
    if state.error:
        _fail(state.error)
    return select_variation(state, select)


def main(argv: Optional[List[str]] = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.api_url:
        config.client.api_url = args.api_url

    setup_logger(config.paths)

    if args.command == "serve":
        from backend.server import run

        run(host=args.host, port=args.port)
        return

    client = ScriptEngineClient(config)
    state = EngineState()

    if args.command == "transcribe":
        state = _with_videos(set_api_key(state, args.gemini_key), args.videos)
        state = asyncio.run(_transcribe(client, state))
        _print_transcripts(state)

    elif args.command == "scripts":
        if len(args.clip) > VIDEO_SLOTS:
            _fail(f"Error: at most {VIDEO_SLOTS} clips are supported.")
        for index, clip in enumerate(args.clip):
            state = set_clip(state, index, clip)
        state = set_product_link(state, args.product)
        state = asyncio.run(_generate(client, state, args.select))
        _print_scripts(state, args.output)

    elif args.command == "run":
        state = _with_videos(set_api_key(state, args.gemini_key), args.videos)
        state = set_product_link(state, args.product)

        async def _run_all(state: EngineState) -> EngineState:
            state = await _transcribe(client, state)
            return await _generate(client, state, args.select)

        state = asyncio.run(_run_all(state))
        _print_transcripts(state)
        _print_scripts(state, args.output)


if __name__ == "__main__":
    main()
