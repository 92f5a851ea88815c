# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import stat
import errno

from ordered_set import OrderedSet

from .config import CopyOptions, CopyTreeOptions, RmTreeOptions
from .errors import CopyFailure, CopyTreeError, BrokenSymlinkError
from .helpers import _dir_id, _readlink
from .operations import copy_stat
from .types import StrPath, ErrorHandler
from .log import logger, _exc_summary

_NO_FOLLOW = CopyOptions(follow_symlinks=False)

class _TreeCopier:
	'''Copies a source tree one directory at a time, recording the entries that fail instead of stopping at them.'''

	def __init__(self, options:CopyTreeOptions):
		self.options    : CopyTreeOptions = options
		self.failures   : list[CopyFailure] = []
		self._ancestors : set[tuple[int, int]] = set() # directories on the current recursion path, to stop symlink loops

	def fail(self, src:str, dst:str, e:OSError) -> None:
		logger.error(_exc_summary(e))
		self.failures.append(CopyFailure(src, dst, e))

	def copy_dir(self, src:str, dst:str) -> None:
		'''Copy the directory `src` to `dst`. Failing to stat or list `src`, or to create `dst`, raises. Anything that goes wrong below that is recorded.'''

		src_st = os.stat(src)
		with os.scandir(src) as it:
			entries = list(it)

		ignored: OrderedSet[str] = OrderedSet()
		if self.options.ignore is not None:
			ignored = OrderedSet(self.options.ignore.ignore(src, entries) or [])

		# owner rwx so children can be created; copy_stat() sets the exact mode at the end
		os.makedirs(dst, mode=stat.S_IMODE(src_st.st_mode) | stat.S_IRWXU, exist_ok=True)

		dir_id = _dir_id(src_st)
		self._ancestors.add(dir_id)
		try:
			for entry in entries:
				if entry.name in ignored:
					logger.debug(f"Ignored: {entry.path}")
					continue
				sub_dst = os.path.join(dst, entry.name)
				try:
					self.copy_entry(entry, sub_dst)
				except OSError as e:
					self.fail(entry.path, sub_dst, e)
		finally:
			self._ancestors.discard(dir_id)

		try:
			copy_stat(src, dst)
		except OSError as e:
			self.fail(src, dst, e)

	def copy_entry(self, entry:os.DirEntry, dst:str) -> None:
		if entry.is_symlink():
			self.copy_symlink(entry, dst)
		elif entry.is_dir():
			self.copy_subdir(entry.path, dst)
		else:
			self.options.copy_function.copy(entry.path, dst)

	def copy_subdir(self, src:str, dst:str) -> None:
		if _dir_id(os.stat(src)) in self._ancestors:
			raise OSError(errno.ELOOP, "Symlink loop", src)
		self.copy_dir(src, dst)

	def copy_symlink(self, entry:os.DirEntry, dst:str) -> None:
		if self.options.symlinks:
			target = _readlink(entry.path)
			os.symlink(target, dst, target_is_directory=entry.is_dir())
			copy_stat(entry.path, dst, _NO_FOLLOW)
			logger.debug(f"L {dst} -> {target}")
		elif not os.path.exists(entry.path):
			if self.options.ignore_dangling_symlinks:
				logger.warning(f"Skipped dangling symlink: {entry.path}")
			else:
				raise BrokenSymlinkError("Broken symlink", entry.path)
		elif entry.is_dir():
			self.copy_subdir(entry.path, dst)
		else:
			self.options.copy_function.copy(entry.path, dst)

def copy_tree(src:StrPath, dst:StrPath, options:CopyTreeOptions|None = None) -> str:
	'''
	Recursively copy a directory tree and return the destination directory.

	The destination directory, and any missing parents, are created if needed. Existing files in it may be overwritten by the copy strategy.

	If `options.symlinks` is `True`, symbolic links in the source tree result in symbolic links in the destination tree; if it is `False`, the contents of the files and directories pointed to by symbolic links are copied. A symlink whose target doesn't exist is reported as a `BrokenSymlinkError` unless `options.ignore_dangling_symlinks` is `True`.

	`options.ignore` is called once for each directory copied, with the directory path and its entries (`os.DirEntry` objects, in listing order), and returns the names in that directory that should not be copied.

	`options.copy_function` copies each file. It is called with the source and destination paths only, so symlinks reaching it are followed. By default, `copy2()` is used.

	Errors stat-ing or listing `src`, or creating `dst`, are raised immediately. Any other error is recorded and the copy goes on; once the whole tree has been visited, a `CopyTreeError` listing every failure is raised.
	'''

	if options is None:
		options = CopyTreeOptions()
	elif not isinstance(options, CopyTreeOptions):
		raise TypeError(f"Bad type for arg 'options' (expected CopyTreeOptions|None): {options}")

	src = os.fspath(src)
	dst = os.fspath(dst)

	copier = _TreeCopier(options)
	copier.copy_dir(src, dst)
	if copier.failures:
		raise CopyTreeError(src, copier.failures)
	return dst

def _raise_error(func, path:str, exc:BaseException) -> None:
	raise exc

def _ignore_error(func, path:str, exc:BaseException) -> None:
	logger.debug(f"Ignored: {_exc_summary(exc)}")

def _rmtree(path:str, onerror:ErrorHandler) -> None:
	'''Remove the contents of `path` depth first, then `path` itself.'''

	try:
		with os.scandir(path) as it:
			entries = list(it)
	except OSError as e:
		onerror(os.scandir, path, e)
		entries = []

	for entry in entries:
		try:
			is_dir = entry.is_dir(follow_symlinks=False)
		except OSError:
			is_dir = False
		if is_dir:
			_rmtree(entry.path, onerror)
		else:
			try:
				os.unlink(entry.path)
				logger.debug(f"- {entry.path}")
			except OSError as e:
				onerror(os.unlink, entry.path, e)

	try:
		os.rmdir(path)
		logger.debug(f"- {path}{os.sep}")
	except OSError as e:
		onerror(os.rmdir, path, e)

def rm_tree(path:StrPath, options:RmTreeOptions|None = None) -> None:
	'''
	Recursively delete a directory tree.

	If `options.ignore_errors` is set, errors are ignored; otherwise, if `options.onerror` is set, it is called to handle each error with arguments `(func, path, exc)` where `func` is the `os` function that failed, `path` is the argument that caused it to fail and `exc` is the exception, and removal continues. If neither is set, the first error is raised.

	Symbolic links are never followed; `path` itself must not be a symlink.
	'''

	if options is None:
		options = RmTreeOptions()
	elif not isinstance(options, RmTreeOptions):
		raise TypeError(f"Bad type for arg 'options' (expected RmTreeOptions|None): {options}")

	path = os.fspath(path)

	onerror: ErrorHandler
	if options.ignore_errors:
		onerror = _ignore_error
	elif options.onerror is not None:
		onerror = options.onerror
	else:
		onerror = _raise_error

	if os.path.islink(path):
		onerror(os.path.islink, path, OSError(errno.ENOTDIR, "Cannot call rm_tree on a symbolic link", path))
		return

	_rmtree(path, onerror)
