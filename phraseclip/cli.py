"""Thin CLI entry point: builds a Manifest and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from phraseclip.analyzers.phrases import CLIP_LABEL, DEFAULT_PHRASE_SET, PHRASE_SETS
from phraseclip.engine import process
from phraseclip.manifest import ClipConfig, Manifest, load_manifest


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="phraseclip",
        description="PhraseClip: cut a clip for every subtitle line that mentions a phrase.",
    )
    sub = parser.add_subparsers(dest="command")

    proc = sub.add_parser("process", help="Clip every video in a directory")
    proc.add_argument("input_dir", nargs="?", type=Path, help="Directory of .mp4/.mkv files")
    proc.add_argument("output_dir", nargs="?", type=Path, help="Directory for the clips")
    proc.add_argument("end_offset_arg", nargs="?", type=float, metavar="END_OFFSET",
                      help="Seconds to extend each clip past the end of its line")
    proc.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    proc.add_argument("--end-offset", type=float, help="Same as END_OFFSET")
    proc.add_argument("--phrases", choices=sorted(PHRASE_SETS), default=DEFAULT_PHRASE_SET,
                      help="Which phrase variant list to search for")
    proc.add_argument("--label", type=str, default=CLIP_LABEL, help="Label used in clip file names")
    proc.add_argument("--subtitle-stream", type=int, default=0, help="Subtitle stream index to extract")
    proc.add_argument("--keep-going", action="store_true", help="Skip files that fail instead of aborting")
    proc.add_argument("--verbose", "-v", action="store_true", help="Show ffmpeg output")
    proc.add_argument("--quiet", "-q", action="store_true", help="Only show warnings and errors")

    serve = sub.add_parser("serve", help="Launch the web UI")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from phraseclip.web import create_app
        app = create_app()
        print(f"PhraseClip web UI: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    level = logging.DEBUG if args.verbose else logging.WARNING if args.quiet else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")

    if args.manifest:
        m = load_manifest(args.manifest)
    elif args.input_dir and args.output_dir:
        end_offset = args.end_offset if args.end_offset is not None else args.end_offset_arg
        m = Manifest(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            clips=ClipConfig(
                end_offset=end_offset,
                phrase_set=args.phrases,
                label=args.label,
                subtitle_stream=args.subtitle_stream,
                keep_going=args.keep_going,
            ),
        )
    else:
        print("Error: provide INPUT_DIR and OUTPUT_DIR, or --manifest.", file=sys.stderr)
        sys.exit(1)

    def on_progress(stage: str, frac: float) -> None:
        if not args.quiet:
            print(f"  [{frac:4.0%}] {stage}")

    try:
        result = process(m, on_progress=on_progress)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print()
    print(f"Done! Clips written to: {result.output_dir}")
    for f in result.files:
        if f.error:
            print(f"  {f.path.name}: FAILED ({f.error})")
        elif not f.clips:
            print(f"  {f.path.name}: no matches")
        else:
            print(f"  {f.path.name}: {len(f.clips)} clip(s)")
    print(f"  Total clips: {result.clip_count}")
    if result.failed:
        sys.exit(1)
