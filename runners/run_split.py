from pathlib import Path
import argparse
import json
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import config
from pipeline.errors import SplitError
from pipeline.models import SplitOptions, SplitResult, minutes_to_duration
from pipeline.split_session import split_wav


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Split a WAV file into fixed-duration chunks")
    parser.add_argument("input", nargs="?", default=config.DEFAULT_INPUT_FILE, help="Path to the input WAV file")
    parser.add_argument("minutes", nargs="?", type=int, default=config.DEFAULT_CHUNK_MINUTES, help="Chunk duration in minutes")
    parser.add_argument("prefix", nargs="?", default=config.DEFAULT_OUTPUT_PREFIX, help="Output filename prefix")
    parser.add_argument("--seconds", type=float, default=None, help="Chunk duration in seconds (overrides minutes)")
    parser.add_argument("--output-dir", default=config.DEFAULT_OUTPUT_DIR, help="Directory for the chunk files")
    parser.add_argument("--packet-frames", type=int, default=config.DEFAULT_PACKET_FRAMES, help="Frames per decoded packet")
    parser.add_argument("--overwrite", action="store_true", help="Replace chunk files that already exist")
    parser.add_argument("--quiet", action="store_true", help="Only print the JSON summary")
    return parser.parse_args(argv)


def result_to_dict(result: SplitResult) -> dict:
    return {
        "chunk_count": result.chunk_count,
        "total_duration_seconds": round(float(result.total_duration), 3),
        "chunks": [
            {
                "index": chunk.index,
                "path": str(chunk.path),
                "start_seconds": round(float(chunk.start_time), 3),
                "duration_seconds": round(float(chunk.duration), 3),
                "byte_length": chunk.byte_length,
            }
            for chunk in result.chunks
        ],
    }


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    chunk_duration = args.seconds if args.seconds is not None else minutes_to_duration(args.minutes)
    options = SplitOptions(
        input_path=args.input,
        chunk_duration=chunk_duration,
        output_dir=args.output_dir,
        prefix=args.prefix,
        packet_frames=args.packet_frames,
        overwrite=args.overwrite,
        verbose=not args.quiet,
    )

    try:
        result = split_wav(options)
    except SplitError as exc:
        print(json.dumps({"ok": False, "stage": exc.stage, "path": exc.path, "error": exc.message}, indent=2))
        return 2

    print(json.dumps({"ok": True, **result_to_dict(result)}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
