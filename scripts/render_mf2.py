#!/usr/bin/env python3
"""Classify and render a microformats2 JSON file the way the Micropub endpoint would."""

import argparse
import json
import sys
from pathlib import Path

from config import load_config
from micropub import MicroformatDocument, MicropubConfig, ValidationError, process_document


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("path", help="mf2 JSON file, or - for stdin")
    parser.add_argument("--config", default=None, help="config.yml to read micropub settings from")
    parser.add_argument("--no-wrap", action="store_true", help="do not wrap the body in the root element")
    args = parser.parse_args()

    try:
        raw = sys.stdin.read() if args.path == "-" else Path(args.path).read_text()
    except OSError as e:
        print(f"Cannot read {args.path}: {e}", file=sys.stderr)
        return 1

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON: {e}", file=sys.stderr)
        return 1

    config = load_config(args.config)
    if args.no_wrap:
        config["micropub"] = dict(config.get("micropub") or {})
        config["micropub"]["wrap_microformat_element"] = False
    settings = MicropubConfig.from_config(config)

    try:
        post = process_document(MicroformatDocument.from_json(payload), settings)
    except ValidationError as e:
        print(f"Invalid Micropub document: {e}", file=sys.stderr)
        return 1

    print(f"Post type: {post.post_type.value}")
    print(f"Template: {post.template}")
    print(f"Title: {post.title}")
    print(f"Published: {'yes' if post.published else 'no'}")
    print("Body:")
    print(post.body)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
