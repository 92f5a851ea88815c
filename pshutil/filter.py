# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import re
import glob
from dataclasses import dataclass
from typing import Iterable

from .types import IgnoreFunction

class Ignore:
	'''Abstract base class for the ignore strategies used by `copy_tree()`. `ignore()` is called once for every directory visited.'''

	def ignore(self, src:str, entries:list[os.DirEntry]) -> Iterable[str]:
		'''(Abstract method) Return the names of the entries in `src` that should not be copied.'''

		raise NotImplementedError()

	def __call__(self, src:str, entries:list[os.DirEntry]) -> Iterable[str]:
		return self.ignore(src, entries)

class FunctionIgnore(Ignore):
	'''Ignore strategy that delegates to a plain function with the `IgnoreFunction` signature.'''

	def __init__(self, func:IgnoreFunction):
		if not callable(func):
			raise TypeError(f"Bad type for arg 'func' (expected callable): {func}")
		self.func = func

	def ignore(self, src:str, entries:list[os.DirEntry]) -> Iterable[str]:
		return self.func(src, entries)

	def __repr__(self):
		return f"FunctionIgnore({self.func!r})"

class PatternIgnore(Ignore):
	'''
	Ignore strategy that skips entries whose name matches any of a list of glob patterns.

	Patterns are matched against entry names only, never against paths. A pattern ending with "/" only matches directories.

	>>> p = PatternIgnore("*.pyc", "__pycache__/", ".git")
	>>> p.match("a.pyc")
	True
	>>> p.match("a.py")
	False
	>>> p.match("__pycache__", is_dir=True)
	True
	>>> p.match("__pycache__", is_dir=False)
	False
	>>> p.match(".git", is_dir=True)
	True
	>>> PatternIgnore("*.TXT", ignore_case=True).match("notes.txt")
	True
	>>> PatternIgnore("*", ignore_hidden=True).match(".hidden")
	False
	>>> PatternIgnore("a/b")
	Traceback (most recent call last):
	...
	ValueError: Ignore patterns match entry names, not paths: a/b
	'''

	if os.sep == "\\":
		seps = r"\\/" # regex pattern is deliberate
	else:
		seps = "/"

	@dataclass
	class _Pattern:
		'''A single compiled ignore pattern.'''

		glob_pattern : str        # pattern as given, without its trailing slash
		dir_only     : bool       # pattern ended with "/"
		matcher      : re.Pattern # compiled regular expression that does the matching

		def __str__(self):
			return self.glob_pattern + ("/" if self.dir_only else "")

	def __init__(self, *patterns:str, ignore_case:bool = False, ignore_hidden:bool = False):
		'''
		Initialize a `PatternIgnore` object.

		Args
			patterns        (str) : Glob patterns (`*`, `?`, `[...]`) matched against entry names.
			ignore_case    (bool) : Match case-insensitively. (Defaults to `False`.)
			ignore_hidden  (bool) : Wildcards do not match names beginning with a dot. (Defaults to `False`.)
		'''

		self.ignore_case   = ignore_case
		self.ignore_hidden = ignore_hidden
		self.patterns      = [self._parse_pattern(p) for p in patterns]

	def _parse_pattern(self, pattern:str) -> "PatternIgnore._Pattern":
		if not isinstance(pattern, str):
			raise TypeError(f"Bad type for ignore pattern (expected str): {pattern}")
		dir_only = pattern.endswith("/") or (os.sep == "\\" and pattern.endswith("\\"))
		glob_pattern = pattern[:-1] if dir_only else pattern
		if not glob_pattern:
			raise ValueError(f"Empty ignore pattern: {pattern!r}")
		if re.search(rf"[{PatternIgnore.seps}]", glob_pattern):
			raise ValueError(f"Ignore patterns match entry names, not paths: {pattern}")
		regex = glob.translate(glob_pattern, include_hidden=(not self.ignore_hidden))
		matcher = re.compile(regex, flags=re.IGNORECASE if self.ignore_case else 0)
		return PatternIgnore._Pattern(glob_pattern=glob_pattern, dir_only=dir_only, matcher=matcher)

	def match(self, name:str, *, is_dir:bool = False) -> bool:
		'''Returns `True` if the entry `name` matches any pattern.'''

		for p in self.patterns:
			if p.dir_only and not is_dir:
				continue
			if p.matcher.match(name):
				return True
		return False

	def ignore(self, src:str, entries:list[os.DirEntry]) -> Iterable[str]:
		if not self.patterns:
			return []
		ignored = []
		for entry in entries:
			try:
				is_dir = entry.is_dir()
			except OSError:
				is_dir = False
			if self.match(entry.name, is_dir=is_dir):
				ignored.append(entry.name)
		return ignored

	def __repr__(self):
		return f"PatternIgnore({', '.join(repr(str(p)) for p in self.patterns)})"

def ignore_patterns(*patterns:str, ignore_case:bool = False, ignore_hidden:bool = False) -> PatternIgnore:
	'''
	Shorthand for `PatternIgnore`, to be passed as the `ignore` option of `copy_tree()`.

	>>> ignore_patterns("*.tmp", "build/")
	PatternIgnore('*.tmp', 'build/')
	'''

	return PatternIgnore(*patterns, ignore_case=ignore_case, ignore_hidden=ignore_hidden)
