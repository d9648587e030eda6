#!/usr/bin/env python3
"""
Segment Content Script
======================
Command-line interface for running the segmenters on local input.

Usage:
    python scripts/segment_content.py --html article.html
    python scripts/segment_content.py --text notes.txt --words 300
    python scripts/segment_content.py --duration 1500 --window 600
    python scripts/segment_content.py --html article.html --json
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from studysplit.config import get_config
from studysplit.segmentation import ContentSegmenter, segment_text, segment_timeline
from studysplit.utils import duration_label
from studysplit.logging_config import get_app_logger

logger = get_app_logger("cli", log_to_file=False)


def main():
    parser = argparse.ArgumentParser(
        description="Split articles and video durations into study segments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Segment an HTML file with the configured word budget
    python scripts/segment_content.py --html article.html

    # Segment a text file, 300 words per segment
    python scripts/segment_content.py --text notes.txt --words 300

    # Cut a 25 minute video into 10 minute windows
    python scripts/segment_content.py --duration 1500 --window 600
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument('--html', type=str, metavar='FILE', help='HTML file to segment')
    source.add_argument('--text', type=str, metavar='FILE', help='Plain-text file to segment')
    source.add_argument('--duration', type=int, metavar='SECONDS', help='Video duration to segment')

    parser.add_argument(
        '--words', '-w',
        type=int,
        default=None,
        help='Word budget per segment (default: from configuration)'
    )

    parser.add_argument(
        '--window',
        type=int,
        default=None,
        help='Window size in seconds for --duration (default: from configuration)'
    )

    parser.add_argument(
        '--json',
        action='store_true',
        help='Print segments as JSON'
    )

    args = parser.parse_args()

    for name in ('words', 'window'):
        value = getattr(args, name)
        if value is not None and value <= 0:
            parser.error(f"--{name} must be a positive integer")

    if args.duration is not None and args.duration < 0:
        parser.error("--duration must not be negative")

    config = get_config().segmentation
    if args.words:
        config.article_segment_minutes = 1
        config.words_per_minute = args.words

    if args.duration is not None:
        window = args.window or config.video_segment_seconds
        return print_segments(segment_timeline(args.duration, window), args.json)

    input_path = Path(args.html or args.text)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}")
        return 1

    content = input_path.read_text(encoding='utf-8')
    if args.html:
        segments, tier = ContentSegmenter(config).segment_article(html=content)
        logger.info(f"Segmented with the {tier.value} segmenter")
    else:
        segments = segment_text(content, config.max_words_per_segment)

    return print_segments(segments, args.json)


def print_segments(segments, as_json: bool) -> int:
    """Print segments as JSON or as a short human-readable listing."""
    if as_json:
        print(json.dumps([s.to_dict() for s in segments], indent=2))
        return 0

    print("=" * 60)
    print(f"{len(segments)} SEGMENTS")
    print("=" * 60)

    for index, segment in enumerate(segments, 1):
        if hasattr(segment, 'word_count'):
            preview = segment.text[:70].replace('\n', ' ')
            print(f"{index:3d}. {segment.word_count:5d} words  {preview}")
        else:
            cue = segment.cue
            print(f"{index:3d}. {cue.start} - {cue.end}  ({duration_label(segment.duration_seconds)})")

    return 0


if __name__ == '__main__':
    sys.exit(main())
