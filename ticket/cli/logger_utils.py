"""
Logger Utilities - Mirror terminal output into a log file for a CLI run
"""
import sys
import traceback
from pathlib import Path


class TerminalTee:
    """
    Context manager to redirect both stdout and stderr to both the terminal and a file.
    """
    def __init__(self, filename):
        self.filename = Path(filename)
        self.terminal_stdout = sys.stdout
        self.terminal_stderr = sys.stderr
        self.log = None

    def __enter__(self):
        """Open the log (creating its directory) and take over stdout and stderr."""
        self.filename.parent.mkdir(parents=True, exist_ok=True)
        self.log = open(self.filename, 'w', encoding='utf-8')
        sys.stdout = self
        sys.stderr = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        sys.stdout = self.terminal_stdout
        sys.stderr = self.terminal_stderr

        # Record the crash in the log as well
        if exc_type and self.log:
            self.log.write("\n" + "=" * 70 + "\n")
            self.log.write("CRITICAL ERROR CAPTURED:\n")
            self.log.write("".join(traceback.format_exception(exc_type, exc_val, exc_tb)))
            self.log.write("=" * 70 + "\n")

        self.close()

    def write(self, message):
        """Echo to the terminal and append to the scan log."""
        self.terminal_stdout.write(message)
        if self.log:
            self.log.write(message)
            self.log.flush()

    def flush(self):
        """Flush the terminal stream and the scan log."""
        if self.terminal_stdout:
            self.terminal_stdout.flush()
        if self.log:
            self.log.flush()

    def close(self):
        """Close the scan log; safe to call twice."""
        if self.log:
            self.log.close()
            self.log = None

    def isatty(self):
        """TTY status of the wrapped terminal stream."""
        return self.terminal_stdout.isatty() if hasattr(self.terminal_stdout, 'isatty') else False

    @property
    def encoding(self):
        """Encoding of the wrapped terminal stream."""
        return getattr(self.terminal_stdout, 'encoding', 'utf-8')

    @property
    def errors(self):
        """Error handler of the wrapped terminal stream."""
        return getattr(self.terminal_stdout, 'errors', 'strict')


def setup_output_capture(image_path, log_dir=None):
    """
    TerminalTee writing to <image stem>_scan_output.txt, next to the image
    unless log_dir is given.
    """
    p = Path(image_path)
    directory = Path(log_dir) if log_dir else p.parent
    return TerminalTee(directory / f"{p.stem}_scan_output.txt")
