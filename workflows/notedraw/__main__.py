"""
Generate visual notes from text on the command line.

Usage (from project root):
    python -m workflows.notedraw "your text here"
    python -m workflows.notedraw --file notes.md --language zh --style chalkboard
    python -m workflows.notedraw --file notes.md --placeholder --output-dir .outputs/notes

Output:
    One image per unit (data URIs decoded to files, URLs listed) plus
    units.json in the output directory.
"""

import argparse
import asyncio
import base64
import binascii
import json
import logging
import mimetypes
import sys
from datetime import datetime
from pathlib import Path

from langchain_core.tracers.langchain import wait_for_all_tracers
from pydantic import ValidationError as SchemaValidationError

from core.config import configure_logging
from core.images import CustomProviderConfig, ImageProvider
from core.logging import end_run
from core.utils import cleanup_all_clients

from .billing import InMemoryCreditLedger
from .config import get_notedraw_config
from .errors import ValidationError
from .orchestrator import PipelineOrchestrator
from .progress import LoggingProgressSink
from .state import (
    AIConfig,
    GenerateMode,
    GenerateRequest,
    Language,
    NoteUnit,
    VisualStyle,
)

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path(".outputs") / "notedraw"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="python -m workflows.notedraw",
        description="Turn text into hand-drawn style visual note images",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("text", nargs="?", help="Text to turn into visual notes")
    source.add_argument("-f", "--file", type=Path, help="Read the text from a file")
    parser.add_argument(
        "-l", "--language",
        choices=[lang.value for lang in Language],
        default=Language.EN.value,
    )
    parser.add_argument(
        "-s", "--style",
        choices=[style.value for style in VisualStyle],
        default=VisualStyle.SKETCH.value,
    )
    parser.add_argument(
        "--mode",
        choices=[mode.value for mode in GenerateMode],
        default=GenerateMode.DETAILED.value,
    )
    parser.add_argument(
        "--provider",
        choices=[provider.value for provider in ImageProvider],
        default=ImageProvider.APIMART.value,
    )
    parser.add_argument("--model", help="Image model name")
    parser.add_argument("--text-model", help="Text model used for analysis")
    parser.add_argument("--custom-base-url", help="Base URL for --provider custom")
    parser.add_argument("--custom-api-key", help="API key for --provider custom")
    parser.add_argument("--signature", help="Signature stamped bottom-right (max 50 chars)")
    parser.add_argument(
        "--placeholder",
        action="store_true",
        help="Render SVG placeholders instead of calling an image provider",
    )
    parser.add_argument(
        "--credits",
        type=int,
        help="Starting credit balance; generation is unmetered when omitted",
    )
    parser.add_argument("-o", "--output-dir", type=Path, default=DEFAULT_OUTPUT_DIR)
    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> GenerateRequest:
    text = args.file.read_text(encoding="utf-8") if args.file else args.text

    ai_config = AIConfig(
        api_provider=ImageProvider(args.provider),
        use_placeholder=args.placeholder,
    )
    if args.model:
        ai_config.image_model = args.model
    if args.text_model:
        ai_config.text_model = args.text_model
    if args.custom_base_url and args.custom_api_key:
        ai_config.custom_provider = CustomProviderConfig(
            base_url=args.custom_base_url,
            api_key=args.custom_api_key,
            model=args.model,
        )

    return GenerateRequest(
        input_text=text,
        language=Language(args.language),
        visual_style=VisualStyle(args.style),
        mode=GenerateMode(args.mode),
        ai_config=ai_config,
        signature=args.signature,
    )


def build_ledger(args: argparse.Namespace) -> InMemoryCreditLedger | None:
    if args.credits is None:
        return None
    return InMemoryCreditLedger(args.credits)


def save_unit_image(unit: NoteUnit, output_dir: Path) -> str | None:
    """Decode data URIs to files; URLs are returned unchanged."""
    ref = unit.image_ref
    if not ref:
        return None
    if not ref.startswith("data:"):
        return ref

    header, _, payload = ref.partition(",")
    mime_type = header[len("data:"):].split(";")[0] or "image/png"
    extension = mimetypes.guess_extension(mime_type) or ".png"
    try:
        data = base64.b64decode(payload)
    except binascii.Error as e:
        logger.warning(f"Could not decode image for unit {unit.order + 1}: {e}")
        return None

    path = output_dir / f"unit-{unit.order + 1:02d}{extension}"
    path.write_bytes(data)
    return str(path)


def save_outputs(units: list[NoteUnit], output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    summary = []
    for unit in units:
        record = unit.model_dump(mode="json", exclude={"image_ref", "original_text"})
        record["image"] = save_unit_image(unit, output_dir)
        summary.append(record)

    summary_path = output_dir / "units.json"
    summary_path.write_text(
        json.dumps(summary, ensure_ascii=False, indent=2), encoding="utf-8"
    )
    return summary_path


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(f"notedraw-{datetime.now().strftime('%Y%m%d-%H%M%S')}")

    config = get_notedraw_config()
    if args.placeholder:
        config = config.model_copy(update={"use_placeholder": True})

    try:
        request = build_request(args)
        ledger = build_ledger(args)
        orchestrator = PipelineOrchestrator(config=config, credits=ledger)
        units = await orchestrator.generate(request, sink=LoggingProgressSink())
    except ValidationError as e:
        logger.error(f"Invalid input: {e.message}")
        return 2
    except SchemaValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 2
    finally:
        await cleanup_all_clients()
        end_run()

    summary_path = save_outputs(units, args.output_dir)
    failed = [unit for unit in units if unit.error_message]

    print("=" * 60)
    print(f"Generated {len(units) - len(failed)}/{len(units)} visual notes")
    for unit in failed:
        print(f"  Unit {unit.order + 1} failed: {unit.error_message}")
    print(f"  Summary: {summary_path}")
    if ledger is not None:
        print(f"  Credits left: {ledger.balance}")
    print("=" * 60)
    return 1 if failed else 0


def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    finally:
        wait_for_all_tracers()


if __name__ == "__main__":
    run()
