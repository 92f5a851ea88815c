# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from dataclasses import dataclass, field

from .filter import Ignore, FunctionIgnore
from .operations import CopyStrategy, Copy2Strategy, FunctionStrategy
from .types import CopyFunction, IgnoreFunction, ErrorHandler

@dataclass(frozen=True)
class CopyOptions:
	'''
	Options for `copy_file()`, `copy_stat()`, `copy_mode()`, `copy()` and `copy2()`.

	Args
		follow_symlinks (bool) : Whether to copy what a symlink points to rather than the symlink itself. (Defaults to `True`.)
	'''

	follow_symlinks : bool = True

	def __post_init__(self):
		if not isinstance(self.follow_symlinks, bool):
			raise TypeError(f"Bad type for property 'follow_symlinks' (expected bool): {self.follow_symlinks}")

@dataclass(frozen=True)
class CopyTreeOptions:
	'''
	Options for `copy_tree()`.

	Args
		symlinks                 (bool) : Whether symlinks in the source tree are recreated as symlinks. If `False`, the files and directories they point to are copied instead. (Defaults to `False`.)
		ignore  (Ignore or callable)    : Strategy called once per visited directory with the directory path and its `os.DirEntry` list; returns the names not to copy. Plain callables are wrapped in `FunctionIgnore`. (Defaults to `None`.)
		copy_function (CopyStrategy or callable) : Strategy used to copy each file. Plain callables with the signature of `copy_file()` are wrapped in `FunctionStrategy`. (Defaults to `Copy2Strategy()`.)
		ignore_dangling_symlinks (bool) : Whether to skip symlinks with missing targets instead of reporting them. Only used when `symlinks` is `False`. (Defaults to `False`.)
	'''

	symlinks                 : bool = False
	ignore                   : Ignore|IgnoreFunction|None = None
	copy_function            : CopyStrategy|CopyFunction = field(default_factory=Copy2Strategy)
	ignore_dangling_symlinks : bool = False

	def __post_init__(self):
		if not isinstance(self.symlinks, bool):
			raise TypeError(f"Bad type for property 'symlinks' (expected bool): {self.symlinks}")
		if not isinstance(self.ignore_dangling_symlinks, bool):
			raise TypeError(f"Bad type for property 'ignore_dangling_symlinks' (expected bool): {self.ignore_dangling_symlinks}")

		if self.ignore is not None and not isinstance(self.ignore, Ignore):
			if not callable(self.ignore):
				raise TypeError(f"Bad type for property 'ignore' (expected Ignore|callable|None): {self.ignore}")
			object.__setattr__(self, "ignore", FunctionIgnore(self.ignore))

		if not isinstance(self.copy_function, CopyStrategy):
			if not callable(self.copy_function):
				raise TypeError(f"Bad type for property 'copy_function' (expected CopyStrategy|callable): {self.copy_function}")
			object.__setattr__(self, "copy_function", FunctionStrategy(self.copy_function))

@dataclass(frozen=True)
class RmTreeOptions:
	'''
	Options for `rm_tree()`.

	Args
		ignore_errors (bool)   : Whether to silently skip entries that cannot be removed. (Defaults to `False`.)
		onerror (callable)     : Called as `onerror(func, path, exc)` for each failure when `ignore_errors` is `False`; removal then continues. If `None`, the first error is raised. (Defaults to `None`.)
	'''

	ignore_errors : bool = False
	onerror       : ErrorHandler|None = None

	def __post_init__(self):
		if not isinstance(self.ignore_errors, bool):
			raise TypeError(f"Bad type for property 'ignore_errors' (expected bool): {self.ignore_errors}")
		if self.onerror is not None and not callable(self.onerror):
			raise TypeError(f"Bad type for property 'onerror' (expected callable|None): {self.onerror}")
