import sys
import logging

# Summary of logging levels used in this package:
# DEBUG    = one record per entry copied, ignored or removed
# INFO     = start and end of a command-line run
# WARNING  = problem encountered but the operation completed (e.g., skipped dangling symlink)
# ERROR    = problem encountered and the entry was not copied
# CRITICAL = Exception raised which halted the program entirely

def _exc_summary(e) -> str:
	'''
	Get a one-line summary of an `Exception`.

	>>> _exc_summary(FileNotFoundError(2, "No such file or directory", "a.txt"))
	'FileNotFoundError: a.txt'
	>>> _exc_summary(OSError(5, "Input/output error"))
	'OSError: Input/output error'
	>>> _exc_summary(ValueError("bad value"))
	'bad value'
	'''

	error_type = type(e).__name__
	affected_file = getattr(e, "filename", None)
	error_message = getattr(e, "strerror", None)
	if isinstance(e, OSError) and affected_file:
		msg = f"{error_type}: {affected_file}"
	elif error_message:
		msg = f"{error_type}: {error_message}"
	else:
		msg = str(e)
	return msg

class _DebugInfoFilter(logging.Filter):
	'''Logging filter that only allows DEBUG and INFO records to pass.'''
	def filter(self, record):
		return logging.DEBUG <= record.levelno <= logging.INFO

class _ConsoleFormatter(logging.Formatter):
	BASE_FORMAT = "%(message)s"

	def __init__(self, fmt=BASE_FORMAT, datefmt=None, style="%"):
		super().__init__(fmt, datefmt, style)

	def format(self, record):
		msg = super().format(record)
		if record.levelno == logging.DEBUG:
			msg = "  " + msg.replace("\n", "\n  ").rstrip(" ")
		elif record.levelno == logging.WARNING:
			msg = f"WARNING: {msg}"
		elif record.levelno == logging.ERROR:
			msg = f"ERROR: {msg}"
		elif record.levelno == logging.CRITICAL:
			msg = f"*** CRITICAL ***: {msg}"
		return msg

logger = logging.getLogger("pshutil")
logger.addHandler(logging.NullHandler())

def setup_logger(level:int = logging.INFO) -> None:
	'''Attach console handlers to the package logger. Called by the command line; library use stays silent unless the caller configures logging.'''

	logger.setLevel(level)
	if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
		handler_stdout = logging.StreamHandler(sys.stdout)
		handler_stderr = logging.StreamHandler(sys.stderr)
		handler_stdout.addFilter(_DebugInfoFilter())
		handler_stdout.setLevel(logging.DEBUG)
		handler_stderr.setLevel(logging.WARNING)
		handler_stdout.setFormatter(_ConsoleFormatter())
		handler_stderr.setFormatter(_ConsoleFormatter())
		logger.addHandler(handler_stdout)
		logger.addHandler(handler_stderr)
