"""
Logging utilities for FilmRecipe
Provides structured logging and conversion tracking
"""

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

import click
import colorlog

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
HANDLER_NAME = "filmrecipe-console"


class StructuredLogger:
    """Provides structured logging with metadata"""

    def __init__(self, name: str, metadata: Optional[Dict[str, Any]] = None):
        """
        Initialize structured logger

        Args:
            name: Logger name
            metadata: Default metadata to include in all logs
        """
        self.logger = logging.getLogger(name)
        self.metadata = metadata or {}

    def _format_message(self, message: str, **kwargs) -> str:
        data = {**self.metadata, **kwargs}
        if data:
            return f"{message} | {json.dumps(data, default=str, sort_keys=True)}"
        return message

    def bind(self, **kwargs) -> 'StructuredLogger':
        """Logger for the same name with extra default metadata"""
        return StructuredLogger(self.logger.name, {**self.metadata, **kwargs})

    def debug(self, message: str, **kwargs):
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs):
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs):
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs):
        self.logger.error(self._format_message(message, **kwargs))


class ConversionStats:
    """Tracks results of a batch of preset conversions"""

    def __init__(self):
        self.start_time = datetime.now()
        self.total_files = 0
        self.processed_files = 0
        self.succeeded_files = 0
        self.failed_files = 0
        self.failure_reasons: Dict[str, int] = {}
        self.errors: List[Dict[str, Any]] = []
        self.processing_times: List[float] = []

    def set_total(self, total: int):
        self.total_files = total

    def add_result(self, succeeded: bool, failure_reason: Optional[str] = None,
                   processing_time: Optional[float] = None):
        """
        Record one conversion

        Args:
            succeeded: Whether the file converted
            failure_reason: Short reason (usually the exception class) on failure
            processing_time: Seconds spent on the file
        """
        self.processed_files += 1
        if succeeded:
            self.succeeded_files += 1
        else:
            self.failed_files += 1
            if failure_reason:
                self.failure_reasons[failure_reason] = self.failure_reasons.get(failure_reason, 0) + 1
        if processing_time is not None:
            self.processing_times.append(processing_time)

    def add_error(self, file_path: str, error: str):
        self.errors.append({'file': file_path, 'error': error, 'time': datetime.now()})

    def get_elapsed_time(self) -> float:
        return (datetime.now() - self.start_time).total_seconds()

    def get_average_processing_time(self) -> float:
        if not self.processing_times:
            return 0.0
        return sum(self.processing_times) / len(self.processing_times)

    def get_summary(self) -> Dict[str, Any]:
        elapsed = self.get_elapsed_time()
        return {
            'total_files': self.total_files,
            'processed_files': self.processed_files,
            'succeeded_files': self.succeeded_files,
            'failed_files': self.failed_files,
            'success_rate': (self.succeeded_files / self.processed_files * 100)
                            if self.processed_files > 0 else 0,
            'failure_reasons': dict(self.failure_reasons),
            'errors': len(self.errors),
            'elapsed_time': elapsed,
            'average_time_per_file': self.get_average_processing_time(),
        }

    def print_summary(self):
        """Print the conversion summary to the console"""
        summary = self.get_summary()

        click.echo("\n" + "=" * 60)
        click.echo("CONVERSION SUMMARY")
        click.echo("=" * 60)
        click.echo(f"Total files:      {summary['total_files']}")
        click.echo(f"Processed:        {summary['processed_files']}")
        click.echo(f"Succeeded:        {summary['succeeded_files']} ({summary['success_rate']:.1f}%)")
        click.echo(f"Failed:           {summary['failed_files']}")

        if summary['failure_reasons']:
            click.echo("\nFailure reasons:")
            for reason, count in sorted(summary['failure_reasons'].items()):
                click.echo(f"  - {reason}: {count}")

        click.echo(f"\nElapsed time:     {summary['elapsed_time']:.1f}s")
        click.echo(f"Avg time/file:    {summary['average_time_per_file']:.3f}s")
        click.echo("=" * 60)

        if self.errors:
            click.echo("\nERRORS:")
            for error in self.errors[:10]:
                click.echo(f"  - {error['file']}: {error['error']}")
            if len(self.errors) > 10:
                click.echo(f"  ... and {len(self.errors) - 10} more errors")


def setup_console_logging(level: str = "INFO", color: bool = True,
                          fmt: str = DEFAULT_FORMAT) -> logging.Handler:
    """
    Setup console logging with optional color support

    Args:
        level: Logging level name
        color: Whether to use colored output (only applied on a TTY)
        fmt: Log record format

    Returns:
        The installed handler
    """
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(HANDLER_NAME)

    if color and sys.stdout.isatty():
        formatter = colorlog.ColoredFormatter(
            '%(log_color)s' + fmt.replace('%(message)s', '%(reset)s%(message)s'),
            log_colors={
                'DEBUG': 'cyan',
                'INFO': 'green',
                'WARNING': 'yellow',
                'ERROR': 'red',
                'CRITICAL': 'red,bg_white',
            }
        )
    else:
        formatter = logging.Formatter(fmt)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        if handler.get_name() == HANDLER_NAME:
            root_logger.removeHandler(handler)
    root_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root_logger.addHandler(console_handler)
    return console_handler
