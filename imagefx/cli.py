"""
Command line front end: apply the effect to one image.

Usage:
    imagefx photo.png --output results/
    python -m imagefx.cli photo.png
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

from imagefx.core import guess_content_type, setup_logging
from imagefx.models import SourceFile, WorkflowPhase
from imagefx.services.transport import ApiTransport
from imagefx.services.workflow import PlaygroundController, WorkflowState


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imagefx", description="Apply the mugshot effect to an image")
    parser.add_argument("image", type=Path, help="Image file to upload")
    parser.add_argument("--output", "-o", type=Path, default=Path("."), help="Directory for the result")
    parser.add_argument("--log-level", default=os.getenv("LOG_LEVEL", "WARNING"))
    return parser


def _print_status(state: WorkflowState) -> None:
    if state.status_text:
        print(state.status_text, flush=True)


async def run(image: Path, output: Path) -> int:
    source = SourceFile(
        name=image.name,
        content=image.read_bytes(),
        content_type=guess_content_type(image.name),
    )
    async with ApiTransport() as transport:
        controller = PlaygroundController(transport)
        controller.state_machine.subscribe(_print_status)

        state = await controller.select_file(source)
        if state.phase is WorkflowPhase.READY:
            state = await controller.generate()
        if state.phase is not WorkflowPhase.COMPLETE:
            print(f"Error: {state.last_error}", file=sys.stderr)
            return 1

        result = await controller.download()
        if result.fallback:
            print(f"Direct download failed. Open {result.url}")
        else:
            print(f"Saved {result.save(output)}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=args.log_level, stream=sys.stderr)
    if not args.image.is_file():
        print(f"File not found: {args.image}", file=sys.stderr)
        return 2
    return asyncio.run(run(args.image, args.output))


if __name__ == "__main__":
    sys.exit(main())
