# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import sys
import logging
import argparse
from argparse import BooleanOptionalAction as BOA

from .config import CopyTreeOptions
from .core import copy_tree
from .errors import CopyTreeError
from .filter import PatternIgnore
from .operations import CopyFileStrategy, CopyModeStrategy, Copy2Strategy
from .log import logger, setup_logger, _exc_summary

_COPY_FUNCTIONS = {
	"copy2"    : Copy2Strategy,
	"copy"     : CopyModeStrategy,
	"copyfile" : CopyFileStrategy,
}

class _ArgParser:
	'''Argument parser for when this package is run with `python -m pshutil`.'''

	parser = argparse.ArgumentParser(
		prog="pshutil",
		description="Recursively copy a directory tree.",
		epilog="(c) 2025 Joe Walter",
		fromfile_prefix_chars="!",
	)

	parser.add_argument("src", help="The directory to copy.")
	parser.add_argument("dst", help="The directory to copy to. It will be created if it does not exist.")

	parser.add_argument("-i", "--ignore", metavar="pattern", action="append", type=str, default=None, help="Glob pattern of entry names that will not be copied. Patterns ending with \"/\" only match directories. Can be given more than once.")
	parser.add_argument("-ih", "--ignore-hidden", action="store_true", default=False, help="Wildcards in ignore patterns do not match names beginning with a dot.")
	parser.add_argument("-ic", "--ignore-case", action="store_true", default=False, help="Ignore case when matching ignore patterns.")
	parser.add_argument("--symlinks", action=BOA, default=False, help="Recreate symbolic links in 'dst' instead of copying what they point to.")
	parser.add_argument("--ignore-dangling-symlinks", action="store_true", default=False, help="Skip symbolic links whose target is missing instead of reporting them as errors.")
	parser.add_argument("--copy-function", choices=list(_COPY_FUNCTIONS), default="copy2", help="How each file is copied: with all metadata (copy2), with permission bits only (copy), or contents only (copyfile).")

	print_level = parser.add_mutually_exclusive_group()
	print_level.add_argument("-q", action="count", default=None, help="Print warnings and errors only (-q) or nothing but critical errors (-qq).")
	print_level.add_argument("--debug", action="store_true", default=False, help="Print every entry copied or ignored.")

	@staticmethod
	def parse(args:list[str]) -> argparse.Namespace:
		'''Convert command line flags into `copy_tree()` options.'''

		parsed_args = _ArgParser.parser.parse_args(args)

		if parsed_args.debug:
			parsed_args.print_level = logging.DEBUG
		elif parsed_args.q == 1:
			parsed_args.print_level = logging.WARNING
		elif parsed_args.q:
			parsed_args.print_level = logging.CRITICAL
		else:
			parsed_args.print_level = logging.INFO
		del parsed_args.q
		del parsed_args.debug

		ignore = None
		if parsed_args.ignore:
			ignore = PatternIgnore(
				*parsed_args.ignore,
				ignore_hidden = parsed_args.ignore_hidden,
				ignore_case   = parsed_args.ignore_case,
			)

		parsed_args.options = CopyTreeOptions(
			symlinks                 = parsed_args.symlinks,
			ignore                   = ignore,
			copy_function            = _COPY_FUNCTIONS[parsed_args.copy_function](),
			ignore_dangling_symlinks = parsed_args.ignore_dangling_symlinks,
		)
		return parsed_args

def main(args:list[str]) -> None:
	'''Copy the tree and exit with status 1 if anything failed.'''

	try:
		parsed_args = _ArgParser.parse(args)
	except ValueError as e:
		setup_logger()
		logger.critical(e)
		sys.exit(2)

	setup_logger(parsed_args.print_level)
	logger.debug(f"{parsed_args=}")
	logger.info(f"   {parsed_args.src}")
	logger.info(f"-> {parsed_args.dst}")

	try:
		copy_tree(parsed_args.src, parsed_args.dst, parsed_args.options)
	except KeyboardInterrupt:
		sys.exit(1)
	except CopyTreeError as e:
		logger.info("")
		logger.error(f"There were {len(e.failures)} errors.")
		for line in e.summary():
			logger.error(line)
		sys.exit(1)
	except OSError as e:
		logger.critical(_exc_summary(e))
		sys.exit(1)
	except Exception:
		logger.critical("An unexpected error occurred.", exc_info=True)
		sys.exit(1)

	logger.info("Done.")
	sys.exit(0)

def _entry() -> None:
	main(sys.argv[1:])

if __name__ == "__main__":
	_entry()
