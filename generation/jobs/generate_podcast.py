#!/usr/bin/env python3
"""Run the podcast pipeline from the command line: python -m generation.jobs.generate_podcast"""
import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

from core.config import get_settings
from core.errors import PipelineError
from core.logging import setup_json_logging
from service.podcast_service import build_pipeline

logger = logging.getLogger(__name__)


def build_payload(args: argparse.Namespace) -> dict:
    """Translate CLI arguments into a generation request body"""
    payload = {"mode": args.mode, "voice": args.voice}
    if args.content_file:
        payload["content"] = Path(args.content_file).read_text(encoding="utf-8")
    elif args.content:
        payload["content"] = args.content
    if args.url:
        payload["url"] = args.url
    if args.video_url:
        payload["videoUrl"] = args.video_url
    return payload


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a narrated podcast episode")
    parser.add_argument("--mode", choices=["text", "url", "video"], required=True, help="Source kind")
    parser.add_argument("--voice", default="alloy", help="Voice id for narration")
    parser.add_argument("--content", help="Source text (text mode)")
    parser.add_argument("--content-file", help="Read source text from a file (text mode)")
    parser.add_argument("--url", help="Web article URL (url mode)")
    parser.add_argument("--video-url", help="YouTube video URL (video mode)")
    parser.add_argument("--out-file", default="podcast.mp3", help="Where to write the MP3")
    parser.add_argument("--script-file", help="Where to write the script text (optional)")

    args = parser.parse_args(argv)

    settings = get_settings()
    setup_json_logging(settings.log_level)

    trace_id = f"generate_podcast_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}"

    try:
        pipeline = build_pipeline(settings)
        result = asyncio.run(pipeline.generate(build_payload(args), trace_id=trace_id))
    except PipelineError as e:
        print(json.dumps({"error": e.message, "status": e.http_status}, ensure_ascii=False), file=sys.stderr)
        return 1

    Path(args.out_file).write_bytes(result.audio.data)
    if args.script_file:
        Path(args.script_file).write_text(result.script, encoding="utf-8")

    print(json.dumps({
        "audio_file": args.out_file,
        "audio_bytes": len(result.audio.data),
        "script_file": args.script_file,
        "script_chars": len(result.script),
        "source_origin": result.source.origin,
        "source_truncated": result.source.truncated,
    }, indent=2, ensure_ascii=False))

    logger.info("Podcast written", extra={
        "trace_id": trace_id,
        "chars": len(result.script),
    })
    return 0


if __name__ == "__main__":
    sys.exit(main())
