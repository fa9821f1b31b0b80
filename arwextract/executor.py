# executor.py
"""Sequential batch extraction with an explicit halt/continue error policy."""

import signal
import sys
from pathlib import Path
from typing import Callable, List, Optional

from tqdm import tqdm

from .config import get_config
from .extractor import ExtractionError, extract_jpeg


# Global shutdown flag
_shutdown_requested = False


def _signal_handler(signum, frame):
    """Handle Ctrl+C gracefully."""
    global _shutdown_requested
    if _shutdown_requested:
        # Second Ctrl+C - force exit
        print("\n\n❌ Force quit requested. Terminating...", file=sys.stderr)
        sys.exit(130)

    _shutdown_requested = True
    print("\n\n⚠️  Shutdown requested. Finishing the current file...", file=sys.stderr)
    print("   (Press Ctrl+C again to force quit)", file=sys.stderr)


def format_failure(result: dict) -> str:
    """Format a failed result as a one-line diagnostic."""
    return (
        f"FATAL: {result['error_type']}: {result['error']} "
        f"[{result['file']}] in {result.get('operation') or 'extract_jpeg'}"
    )


class BatchExecutor:
    """
    Run extraction jobs one at a time, in the order they were planned.

    With on_error='halt' the first failed file stops the batch. With
    on_error='continue' every job is attempted and failures are collected.
    """

    def __init__(
        self,
        output_dir: Path,
        on_error: Optional[str] = None,
        quiet: bool = False,
    ):
        config = get_config()
        self.output_dir = Path(output_dir)
        self.on_error = on_error or config.on_error
        self.show_progress = config.show_progress and not quiet

        # Container layout
        self.offset_position = config.offset_position
        self.length_position = config.length_position
        self.extension = config.extension

        self.interrupted = False

    def _run_extraction(self, job: dict) -> dict:
        """
        Extract the preview of a single raw file.
        """
        raw_file = job['raw_file']
        result = {
            'success': False,
            'file': raw_file.name,
            'output': None,
            'error': None,
            'error_type': None,
            'operation': None,
        }

        operation = 'open'
        try:
            with open(raw_file, 'rb') as raw_fh:
                operation = 'extract_jpeg'
                output_file = extract_jpeg(
                    raw_fh,
                    raw_file.name,
                    self.output_dir,
                    offset_position=self.offset_position,
                    length_position=self.length_position,
                    extension=self.extension,
                    output_name=job.get('output_name'),
                )
            result['success'] = True
            result['output'] = str(output_file)

        except ExtractionError as e:
            result['error'] = str(e)
            result['error_type'] = e.error_type
            result['operation'] = operation

        except OSError as e:
            result['error'] = str(e)
            result['error_type'] = 'io'
            result['operation'] = operation

        return result

    def execute_jobs(
        self,
        jobs: List[dict],
        progress_callback: Optional[Callable[[dict], None]] = None,
    ) -> dict:
        """Execute all jobs sequentially."""
        global _shutdown_requested
        _shutdown_requested = False
        self.interrupted = False

        results = {
            'completed': 0,
            'failed': 0,
            'skipped': 0,
            'failed_jobs': [],
            'results': [],
            'halted': False,
        }

        if not jobs:
            return results

        original_sigint = signal.signal(signal.SIGINT, _signal_handler)

        pbar = tqdm(
            total=len(jobs),
            desc="Extracting",
            unit="file",
            disable=not self.show_progress,
        )
        try:
            for index, job in enumerate(jobs):
                if _shutdown_requested:
                    self.interrupted = True
                    results['skipped'] = len(jobs) - index
                    break

                result = self._run_extraction(job)
                results['results'].append(result)
                pbar.update(1)

                if result['success']:
                    results['completed'] += 1
                    tqdm.write(result['file'], file=sys.stdout)
                    pbar.set_description(f"✓ {result['file'][:25]}")
                else:
                    results['failed'] += 1
                    results['failed_jobs'].append(job)
                    tqdm.write(format_failure(result), file=sys.stderr)
                    pbar.set_description(f"✗ {result['file'][:25]}")

                pbar.set_postfix({'fail': results['failed']})

                if progress_callback:
                    progress_callback(result)

                if not result['success'] and self.on_error == 'halt':
                    results['halted'] = True
                    results['skipped'] = len(jobs) - index - 1
                    break

        finally:
            pbar.close()
            signal.signal(signal.SIGINT, original_sigint)

        return results
