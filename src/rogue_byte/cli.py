# rogue_byte/cli.py
"""
コマンドラインインターフェース

グリッドのテキストファイル同士の差分 (diff) と、差分の適用 (patch) を提供します。
"""
import argparse
import logging
import sys
from typing import List, Optional

from rogue_byte.memory.bytegrid import ByteGrid, ByteGridDiff
from rogue_byte.memory.encoding import Encoding

logger = logging.getLogger(__name__)

def _run_diff(args: argparse.Namespace, encoding: Encoding) -> None:
    before = ByteGrid.load(args.before, encoding)
    after = ByteGrid.load(args.after, encoding)
    data = before.diff(after).serialize()
    logger.debug("Diff of %s -> %s is %d bytes", args.before, args.after, len(data))
    if args.output:
        with open(args.output, "wb") as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()

def _run_patch(args: argparse.Namespace, encoding: Encoding) -> None:
    grid = ByteGrid.load(args.data, encoding)
    with open(args.patch, "rb") as f:
        diff = ByteGridDiff.deserialize(f.read())
    logger.debug("Applying %d hunks from %s", len(diff), args.patch)
    grid.patch(diff)
    if args.output:
        with open(args.output, "wb") as f:
            grid.save(f, encoding)
    else:
        grid.save(sys.stdout.buffer, encoding)
        sys.stdout.buffer.flush()

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rogue-byte", description="Byte grid puzzle tools")
    parser.add_argument("--encoding", default="437", help="Charset name or 256-line charset file (default: 437)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    diff_parser = subparsers.add_parser("diff", help="Write the binary diff of two grid files")
    diff_parser.add_argument("before")
    diff_parser.add_argument("after")
    diff_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    diff_parser.set_defaults(handler=_run_diff)

    patch_parser = subparsers.add_parser("patch", help="Apply a binary diff to a grid file")
    patch_parser.add_argument("data")
    patch_parser.add_argument("patch")
    patch_parser.add_argument("-o", "--output", help="Output file (default: stdout)")
    patch_parser.set_defaults(handler=_run_patch)
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        encoding = Encoding.get(args.encoding)
        args.handler(args, encoding)
    except (OSError, ValueError) as e:
        print(f"{args.command}: {e}", file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
