"""Thin CLI entry point — runs the web API or applies one edit locally."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from promptcut.artifacts import ArtifactStore
from promptcut.config import load_settings
from promptcut.engine import execute, process_instruction
from promptcut.errors import PromptCutError
from promptcut.instruct import InstructionClient
from promptcut.models import MediaAsset
from promptcut.plan import validate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptcut",
        description="PromptCut: cut, split and mute videos from plain-language instructions.",
    )
    parser.add_argument("--env-file", type=Path, help="Read settings from this .env file")
    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Launch the HTTP API")
    serve.add_argument("--port", type=int, help="Port to listen on (default: $PORT or 3000)")
    serve.add_argument("--host", type=str, help="Host to bind to (default: $HOST or 127.0.0.1)")

    apply = sub.add_parser("apply", help="Execute a JSON action plan without the language model")
    apply.add_argument("video", type=Path, help="Input video file")
    apply.add_argument("plan", type=str, help='Plan JSON, e.g. \'{"action": "cut", "start": 5, "end": 10}\'')
    apply.add_argument("--output-dir", "-o", type=Path, help="Where to write results")

    edit = sub.add_parser("edit", help="Turn a prompt into an edit via OpenAI and execute it")
    edit.add_argument("video", type=Path, help="Input video file")
    edit.add_argument("prompt", type=str, help='Instruction, e.g. "keep seconds 5 to 10"')
    edit.add_argument("--output-dir", "-o", type=Path, help="Where to write results")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    settings = load_settings(args.env_file)
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if args.command == "serve":
        from promptcut.web import create_app
        app = create_app(settings)
        host = args.host or settings.host
        port = args.port or settings.port
        print(f"PromptCut API: http://{host}:{port}")
        app.run(host=host, port=port, debug=False)
        return

    if not args.video.is_file():
        print(f"Error: {args.video} does not exist.", file=sys.stderr)
        sys.exit(1)

    store = ArtifactStore(args.output_dir or settings.output_dir)
    asset = MediaAsset(args.video)

    def on_progress(stage: str, frac: float) -> None:
        print(f"  [{frac:3.0%}] {stage}")

    try:
        if args.command == "apply":
            result = asyncio.run(execute(validate(args.plan), asset, store, on_progress=on_progress))
        else:
            client = InstructionClient(
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                temperature=settings.openai_temperature,
            )
            result = asyncio.run(
                process_instruction(args.prompt, asset, client, store, on_progress=on_progress)
            )
    except PromptCutError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(result.status_text)
    for artifact in result.artifacts:
        print(f"  Output: {artifact.path}")
