#!/usr/bin/env python3
"""
deldup CLI - delete files from an unknown folder that already exist in a trusted folder.
Runs the same core engine as the Qt worker, with console-based confirmation.
Deletion is permanent: files are removed, not moved to a trash folder.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import threading
import time
from pathlib import Path
from typing import List, Optional, NoReturn, Tuple
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from deldup.core.channels import AutoConfirmer, CancellationToken, ConfirmationChannel
from deldup.core.models import ConfirmationRequest, Decision, DeletionParams, DeletionStats
from deldup.commands import DeletionCommand
from deldup.utils.convert_utils import ConvertUtils
from deldup.aliases import (
    ALGORITHM_ALIASES, ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT,
    EPILOG_TEXT, PROMPT_TEXT
)

USAGE_ERROR = 255
MAX_EXIT_STATUS = 255
POLL_INTERVAL = 0.2  # seconds between liveness checks of the worker thread

# answer -> (decision, apply_to_all); None means quit
ANSWERS = {
    "y": (Decision.DELETE, False),
    "yes": (Decision.DELETE, False),
    "n": (Decision.SKIP, False),
    "no": (Decision.SKIP, False),
    "a": (Decision.DELETE, True),
    "all": (Decision.DELETE, True),
    "s": (Decision.SKIP, True),
    "skip": (Decision.SKIP, True),
    "q": None,
    "quit": None,
}


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit with USAGE_ERROR instead of 2."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        CLIApplication.error_exit(message)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.token = CancellationToken()
        self._error: Optional[BaseException] = None
        self._stats: Optional[DeletionStats] = None

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        sys.stdout.reconfigure(encoding='utf-8')
        sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = _ArgumentParser(
            prog="deldup",
            description="deldup - delete unknown files that duplicate trusted ones",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "paths",
            nargs="+",
            metavar="[TRUSTED] UNKNOWN",
            help="Trusted file/folder (optional, never modified) and unknown file/folder.\n"
                 "With a single path there is no trusted side and only repeats inside\n"
                 "UNKNOWN are deleted."
        )

        # Scanning options
        parser.add_argument(
            "--no-subfolders",
            action="store_false",
            dest="recurse_subfolders",
            help="Do not descend into subfolders"
        )
        parser.add_argument(
            "--hidden",
            action="store_true",
            dest="include_hidden",
            help="Include hidden files and folders"
        )
        parser.add_argument(
            "--empty",
            action="store_true",
            dest="include_empty_files",
            help="Include zero-byte files"
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="xxh128",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )

        # Deletion options
        parser.add_argument(
            "--delete-readonly",
            action="store_true",
            dest="allow_readonly_delete",
            help="Allow deleting read-only duplicates"
        )
        parser.add_argument(
            "--delete-hidden",
            action="store_true",
            dest="allow_hidden_delete",
            help="Allow deleting hidden duplicates (only with --hidden)"
        )
        parser.add_argument(
            "--simulate",
            action="store_true",
            dest="simulate_only",
            help="Report and count deletions without removing any file"
        )

        # Output options
        parser.add_argument(
            "--force",
            action="store_true",
            help="Delete without asking for confirmation (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Print only the final summary"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug logging and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if len(args.paths) > 2:
            self.error_exit(f"Expected at most two paths, got {len(args.paths)}")

        # Prevent interactive confirmation in non-TTY environments
        if not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        for raw in args.paths:
            path = Path(raw).expanduser()
            if not path.exists():
                self.error_exit(f"File or folder not found: {raw}")
            if not (path.is_dir() or path.is_file()):
                self.error_exit(f"Path is neither a file nor a folder: {raw}")

        if args.allow_hidden_delete and not args.include_hidden:
            self.warning("--delete-hidden has no effect without --hidden")

    def create_params(self, args: argparse.Namespace) -> DeletionParams:
        """Create DeletionParams from CLI arguments."""
        trusted, unknown = self.split_paths(args.paths)
        try:
            params = DeletionParams(
                unknown_root=unknown,
                trusted_root=trusted,
                recurse_subfolders=args.recurse_subfolders,
                include_hidden=args.include_hidden,
                include_empty_files=args.include_empty_files,
                allow_readonly_delete=args.allow_readonly_delete,
                allow_hidden_delete=args.allow_hidden_delete,
                simulate_only=args.simulate_only,
                algorithm=ALGORITHM_ALIASES[args.algorithm],
            )
            # Overlapping trees are a usage error, not an empty run
            DeletionCommand.resolve_roots(params)
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")
        return params

    @staticmethod
    def split_paths(paths: List[str]) -> Tuple[Optional[str], str]:
        """One path is the unknown root; two are trusted then unknown."""
        if len(paths) == 1:
            return None, paths[0]
        return paths[0], paths[1]

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        elif stage == "checksum":
            sys.stderr.write(f"\r  [{stage}] {ConvertUtils.bytes_to_human(current)} read...")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def report_line(self, text: str) -> None:
        if not self.quiet:
            print(text, flush=True)

    def describe_request(self, request: ConfirmationRequest) -> None:
        """Print what is known about a duplicate before asking about it."""
        print(f"  same as  : {request.matched_path}")
        print(f"  size     : {ConvertUtils.bytes_to_human(request.size)}")
        print(f"  modified : {ConvertUtils.timestamp_to_human(request.modified_time)}")
        if request.checksum:
            print(f"  checksum : {request.checksum}")
        if request.tag:
            print(f"  {request.tag}")

    def ask(self, request: ConfirmationRequest) -> Optional[Tuple[Decision, bool]]:
        """
        Prompt until a valid answer is given.
        Returns (decision, apply_to_all), or None when the user quits.
        """
        self.describe_request(request)
        while True:
            try:
                answer = input(PROMPT_TEXT.format(path=request.candidate_path))
            except EOFError:
                return None
            answer = answer.strip().lower()
            if answer in ANSWERS:
                return ANSWERS[answer]
            print("Please answer y, n, a, s or q.")

    def _work(self, params: DeletionParams, confirmer) -> None:
        """Worker thread body: runs the command and keeps the result or error."""
        try:
            self._stats = DeletionCommand().execute(
                params,
                confirmer=confirmer,
                report_line=self.report_line,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.token
            )
        except Exception as e:  # handed back to the main thread
            self._error = e

    def run_deletion(self, params: DeletionParams, force: bool = False) -> DeletionStats:
        """Execute the run on a worker thread; the main thread answers confirmations."""
        if force:
            confirmer = AutoConfirmer(Decision.DELETE)
            channel = None
        else:
            confirmer = channel = ConfirmationChannel(self.token)

        worker = threading.Thread(
            target=self._work, args=(params, confirmer), name="deldup-worker", daemon=True
        )
        worker.start()

        try:
            while worker.is_alive():
                if channel is None:
                    worker.join(POLL_INTERVAL)
                    continue
                request = channel.wait_for_request(timeout=POLL_INTERVAL)
                if request is None or self.token.is_cancelled():
                    continue
                answer = self.ask(request)
                if answer is None:
                    self.token.cancel()
                else:
                    channel.reply(*answer)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
            self.token.cancel()

        worker.join()

        if self.verbose:
            sys.stderr.write("\n")
        if self._error is not None:
            self.error_exit(f"Deletion failed: {self._error}", code=1)
        return self._stats

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"Warning: {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = USAGE_ERROR) -> NoReturn:
        """Print error and exit."""
        print(f"Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> int:
        """Main entry point. Returns the exit status (files deleted, capped)."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        if self.verbose:
            print(f"Checksum algorithm: {params.algorithm.display_name}")
            if params.simulate_only:
                print("Simulation: no file will be deleted")

        stats = self.run_deletion(params, force=args.force)

        if self.quiet:
            print(stats.print_summary())

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\nCompleted in {elapsed:.2f} seconds")

        return min(stats.deleted_files, MAX_EXIT_STATUS)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        status = app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
