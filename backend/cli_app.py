#!/usr/bin/env python3
"""
Model Studio CLI application.

`serve` runs the API with uvicorn; `size-lock` runs the JPEG size lock on a
local file, which is handy for tuning the SIZE_LOCK_* settings.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence


class Colors:
    """ANSI colors for terminal"""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"


def info(msg):
    print(f"{Colors.BLUE}[INFO]{Colors.RESET} {msg}")


def success(msg):
    print(f"{Colors.GREEN}[OK]{Colors.RESET} {msg}")


def warn(msg):
    print(f"{Colors.YELLOW}[WARN]{Colors.RESET} {msg}")


def error(msg):
    print(f"{Colors.RED}[ERROR]{Colors.RESET} {msg}", file=sys.stderr)


def default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_locked.jpg")


class ModelStudioCLI:
    """Command line front end for the catalog backend"""

    def print_banner(self):
        print(f"\n{Colors.CYAN}{Colors.BOLD}")
        print("=" * 60)
        print("          MODEL STUDIO - Catalog Image Backend")
        print("=" * 60)
        print(f"{Colors.RESET}\n")

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="model-studio", description="Model Studio catalog image backend"
        )
        subparsers = parser.add_subparsers(dest="command")

        serve = subparsers.add_parser("serve", help="Start the API server (default)")
        serve.add_argument("--host", default=None, help="Bind address (default: HOST)")
        serve.add_argument("--port", type=int, default=None, help="Port (default: PORT)")
        serve.add_argument("--reload", action="store_true", help="Reload on code changes")

        size_lock = subparsers.add_parser(
            "size-lock", help="Re-encode an image into the JPEG size range"
        )
        size_lock.add_argument("input", type=Path, help="Source image (PNG, JPG, WEBP)")
        size_lock.add_argument(
            "-o", "--output", type=Path, default=None,
            help="Output JPEG (default: <input>_locked.jpg)",
        )
        size_lock.add_argument(
            "--min-bytes", type=int, default=None, help="Lower bound (default: SIZE_LOCK_MIN_BYTES)"
        )
        size_lock.add_argument(
            "--max-bytes", type=int, default=None, help="Upper bound (default: SIZE_LOCK_MAX_BYTES)"
        )
        return parser

    def serve(self, host: Optional[str], port: Optional[int], reload: bool) -> int:
        import uvicorn

        from config import get_settings

        settings = get_settings()
        host = host or settings.HOST
        port = port or settings.PORT

        self.print_banner()
        info(f"Backend:  http://{host}:{port}")
        info(f"API Docs: http://{host}:{port}/docs")
        if not settings.GEMINI_API_KEY:
            warn("GEMINI_API_KEY is not set; /api/generate-image will answer 503")
        print(f"\n{Colors.DIM}Press Ctrl+C to stop{Colors.RESET}\n")

        uvicorn.run("main:app", host=host, port=port, reload=reload)
        return 0

    def size_lock(
        self,
        input_path: Path,
        output_path: Optional[Path],
        min_bytes: Optional[int],
        max_bytes: Optional[int],
    ) -> int:
        from config import get_settings
        from services.size_lock import (
            ConvergenceError,
            SizeLockConfig,
            SizeLockError,
            TargetRange,
            reencode,
        )

        settings = get_settings()
        try:
            target = TargetRange(
                min_bytes=min_bytes if min_bytes is not None else settings.SIZE_LOCK_MIN_BYTES,
                max_bytes=max_bytes if max_bytes is not None else settings.SIZE_LOCK_MAX_BYTES,
            )
            config = SizeLockConfig.from_settings(settings)
        except ValueError as e:
            error(str(e))
            return 1

        try:
            source = input_path.read_bytes()
        except OSError as e:
            error(f"Cannot read {input_path}: {e.strerror or e}")
            return 1

        info(f"Locking {input_path.name} ({len(source) / 1024:.1f}KB) into {target.describe_mb()}")
        try:
            result = reencode(source, target, config)
        except ConvergenceError as e:
            error(f"No encoding within {target.describe_mb()} after {e.attempts} attempt(s)")
            if e.last_result is not None:
                warn(
                    f"Last attempt: {e.last_result.size_mb}MB "
                    f"(width={e.last_result.width}px quality={e.last_result.quality})"
                )
            return 1
        except SizeLockError as e:
            error(str(e))
            return 1

        output_path = output_path or default_output_path(input_path)
        try:
            output_path.write_bytes(result.data)
        except OSError as e:
            error(f"Cannot write {output_path}: {e.strerror or e}")
            return 1

        success(
            f"{output_path} - {result.size_mb}MB "
            f"(width={result.width}px quality={result.quality})"
        )
        return 0

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Parse arguments and dispatch; returns the process exit code"""
        args = self.build_parser().parse_args(argv)

        if args.command == "size-lock":
            return self.size_lock(args.input, args.output, args.min_bytes, args.max_bytes)
        if args.command == "serve":
            return self.serve(args.host, args.port, args.reload)
        return self.serve(None, None, False)


if __name__ == "__main__":
    sys.exit(ModelStudioCLI().run())
