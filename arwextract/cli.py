# CLI module
"""Command-line interface for arw2jpg."""

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILE, create_config_file, get_config


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_EXTRACTION_FAILED = 3
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog='arw2jpg',
        description='Extract the embedded preview JPEG from every .ARW file in a folder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s ~/Pictures/RAW
  %(prog)s ~/Pictures/RAW ~/Pictures/previews
  %(prog)s ~/Pictures/RAW ~/Pictures/previews --keep-going
  %(prog)s --configure
        """,
    )

    # Main arguments
    parser.add_argument(
        'input_dir',
        nargs='?',
        type=Path,
        help='Input directory containing .ARW files (not recursive)',
    )
    parser.add_argument(
        'output_dir',
        nargs='?',
        type=Path,
        default=Path('.'),
        help='Output directory for extracted JPEGs (default: current directory)',
    )

    # Error policy / output control
    parser.add_argument(
        '--keep-going',
        action='store_true',
        help='Continue with the next file after a failure instead of stopping',
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Suppress the progress bar and summary',
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help=f'Config file to read (default: {CONFIG_FILE})',
    )

    # Utility commands
    parser.add_argument(
        '--configure',
        action='store_true',
        help='Create initial config.ini with default values',
    )
    parser.add_argument(
        '-y', '--yes',
        action='store_true',
        help='Skip confirmation prompts',
    )

    return parser


def handle_configure(path: Path = CONFIG_FILE, assume_yes: bool = False) -> int:
    """Create config.ini with default values."""
    if path.exists() and not assume_yes:
        print(f"⚠️  Config file already exists: {path.absolute()}")
        response = input("Overwrite? [y/N]: ").strip().lower()
        if response != 'y':
            print("Aborted.")
            return EXIT_USAGE

    create_config_file(path)
    print(f"✓ Created config file: {path.absolute()}")
    print("  Edit this file to customize settings.")
    return EXIT_OK


def _setup_failure(path: Path, error: OSError, operation: str) -> dict:
    """Describe an I/O failure outside of a single file as a failed result."""
    return {
        'file': str(path),
        'error': str(error),
        'error_type': 'io',
        'operation': operation,
    }


def run_extraction(args: argparse.Namespace) -> int:
    """Run the main extraction workflow."""
    from .executor import BatchExecutor, format_failure
    from .planner import create_extraction_jobs, find_raw_files

    try:
        config = get_config(args.config)
        config.validate()
        on_error = 'continue' if args.keep_going else config.on_error
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    inpath = args.input_dir
    outpath = args.output_dir
    try:
        outpath.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(format_failure(_setup_failure(outpath, e, 'mkdir')), file=sys.stderr)
        return EXIT_EXTRACTION_FAILED

    show_status = not args.quiet

    if show_status:
        print(f"\n📁 Input:  {inpath.resolve()}", file=sys.stderr)
        print(f"📁 Output: {outpath.resolve()}", file=sys.stderr)
        print(file=sys.stderr)

    try:
        raw_files = find_raw_files(inpath, config.suffix)
    except OSError as e:
        print(format_failure(_setup_failure(inpath, e, 'find_raw_files')), file=sys.stderr)
        return EXIT_EXTRACTION_FAILED

    jobs = create_extraction_jobs(raw_files, config.extension)

    if show_status:
        print(f"🔍 Found {len(jobs)} {config.suffix} file(s)", file=sys.stderr)

    if not jobs:
        return EXIT_OK

    executor = BatchExecutor(outpath, on_error=on_error, quiet=args.quiet)
    results = executor.execute_jobs(jobs)

    if show_status:
        print(file=sys.stderr)
        print("=" * 50, file=sys.stderr)
        print(f"✓ Extracted: {results['completed']} files", file=sys.stderr)
        print(f"✗ Failed:    {results['failed']} files", file=sys.stderr)
        if results['skipped']:
            print(f"- Skipped:   {results['skipped']} files", file=sys.stderr)
        print("=" * 50, file=sys.stderr)

        if on_error == 'continue' and results['failed']:
            print("\n⚠️  Some files failed.", file=sys.stderr)
            for result in results['results']:
                if not result['success']:
                    print(f"   ✗ {format_failure(result)}", file=sys.stderr)

    if executor.interrupted:
        return EXIT_INTERRUPTED
    if results['failed']:
        return EXIT_EXTRACTION_FAILED
    return EXIT_OK


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Handle utility commands first
    if args.configure:
        return handle_configure(args.config or CONFIG_FILE, args.yes)

    # Require input_dir for extraction
    if not args.input_dir:
        parser.print_help()
        print("\n❌ Error: input_dir is required.")
        return EXIT_USAGE

    if not args.input_dir.is_dir():
        print(f"❌ Error: Input directory does not exist: {args.input_dir}", file=sys.stderr)
        return EXIT_USAGE

    return run_extraction(args)


if __name__ == '__main__':
    sys.exit(main())
