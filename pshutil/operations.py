# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import stat
import errno
from typing import Any, Callable, TYPE_CHECKING

from .errors import SameFileError, SpecialFileError, CopyNotCompleteError, MetadataUpdateError
from .helpers import _is_fifo, _samefile, _readlink
from .types import StrPath, CopyFunction
from .log import logger

if TYPE_CHECKING:
	from .config import CopyOptions

COPY_BUFSIZE = 1024 * 1024 if os.name == "nt" else 64 * 1024

_UNSUPPORTED = {errno.ENOTSUP, errno.EOPNOTSUPP}

def _follow_symlinks(options:"CopyOptions|None") -> bool:
	return True if options is None else options.follow_symlinks

def _copyfileobj(fsrc, fdst, length:int = COPY_BUFSIZE) -> int:
	'''
	Stream `fsrc` into `fdst` and return the number of bytes actually written. Copying stops at the first short write.

	>>> import io
	>>> _copyfileobj(io.BytesIO(b"abc" * 10), io.BytesIO(), length=4)
	30
	>>> class HalfWriter(io.RawIOBase):
	...     def writable(self):
	...         return True
	...     def write(self, b):
	...         return len(b) // 2
	>>> _copyfileobj(io.BytesIO(b"x" * 100), HalfWriter())
	50
	'''

	copied = 0
	while True:
		buf = fsrc.read(length)
		if not buf:
			break
		n = fdst.write(buf) or 0
		copied += n
		if n < len(buf):
			break
	return copied

def copy_file(src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
	'''
	Copy the data of file `src` to `dst` and return `dst`.

	If `options.follow_symlinks` is `False` and `src` is a symbolic link, a new symlink pointing to the same target is created at `dst` instead of copying the file it points to.

	Raises
		SameFileError        : `src` and `dst` are the same file (including hard links).
		SpecialFileError     : `src` or an existing `dst` is a named pipe.
		CopyNotCompleteError : fewer bytes reached `dst` than `src` reported.
		OSError              : any other filesystem error, unchanged.
	'''

	src = os.fspath(src)
	dst = os.fspath(dst)
	copy_link = not _follow_symlinks(options) and os.path.islink(src)

	src_st = os.lstat(src) if copy_link else os.stat(src)
	if _is_fifo(src_st):
		raise SpecialFileError(src)

	try:
		dst_st = os.stat(dst)
	except FileNotFoundError:
		dst_st = None

	if dst_st is not None:
		same = _samefile(src, dst) if copy_link else os.path.samestat(src_st, dst_st)
		if same:
			raise SameFileError(src, dst)
		if _is_fifo(dst_st):
			raise SpecialFileError(dst)

	if copy_link:
		target = _readlink(src)
		os.symlink(target, dst, target_is_directory=os.path.isdir(src))
		logger.debug(f"L {dst} -> {target}")
		return dst

	# unbuffered dst so that short writes are visible to _copyfileobj
	with open(src, "rb") as fsrc, open(dst, "wb", buffering=0) as fdst:
		copied = _copyfileobj(fsrc, fdst)

	if copied != src_st.st_size:
		logger.warning(f"{src}: {copied}/{src_st.st_size} bytes copied")
		raise CopyNotCompleteError(src, dst, copied, src_st.st_size)

	logger.debug(f"+ {dst}")
	return dst

def _nop(*args, **kwargs) -> None:
	pass

def _lookup(name:str, follow_symlinks:bool) -> Callable[..., Any]:
	'''Get the `os` function `name`, or a no-op if this platform lacks it or cannot apply it to a symlink itself.'''

	func = getattr(os, name, None)
	if func is None:
		return _nop
	if not follow_symlinks and func not in os.supports_follow_symlinks:
		return _nop
	return func

def _metadata_follow(src:str, dst:str, options:"CopyOptions|None") -> bool:
	'''Symlinks are only left unfollowed when asked to and both `src` and `dst` are symlinks.'''

	return _follow_symlinks(options) or not (os.path.islink(src) and os.path.islink(dst))

def _set_mode(dst:str, mode:int, follow_symlinks:bool) -> None:
	try:
		_lookup("chmod", follow_symlinks)(dst, mode, follow_symlinks=follow_symlinks)
	except NotImplementedError:
		# symlink permissions cannot be changed on this platform
		pass
	except OSError as e:
		if not follow_symlinks and e.errno in _UNSUPPORTED:
			return
		raise MetadataUpdateError("Could not update permission bits", dst) from e

def copy_mode(src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> None:
	'''Copy the permission bits of `src` to `dst`. Symlinks are not followed only if `options.follow_symlinks` is `False` and both `src` and `dst` are symlinks.'''

	src = os.fspath(src)
	dst = os.fspath(dst)
	follow = _metadata_follow(src, dst, options)
	st = os.stat(src, follow_symlinks=follow)
	_set_mode(dst, stat.S_IMODE(st.st_mode), follow)

def copy_stat(src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> None:
	'''
	Copy the permission bits, access and modification times, and flags (where supported) of `src` to `dst`.

	If `options.follow_symlinks` is `False`, symlinks are not followed if and only if both `src` and `dst` are symlinks. Where the platform cannot update a symlink itself, that part of the metadata is skipped.

	Raises
		OSError             : `src` cannot be stat'd (unchanged).
		MetadataUpdateError : metadata could not be applied to `dst`.
	'''

	src = os.fspath(src)
	dst = os.fspath(dst)
	follow = _metadata_follow(src, dst, options)
	st = os.stat(src, follow_symlinks=follow)

	try:
		_lookup("utime", follow)(dst, ns=(st.st_atime_ns, st.st_mtime_ns), follow_symlinks=follow)
	except NotImplementedError:
		pass
	except OSError as e:
		raise MetadataUpdateError("Could not update time metadata", dst) from e

	_set_mode(dst, stat.S_IMODE(st.st_mode), follow)

	if hasattr(st, "st_flags"):
		try:
			_lookup("chflags", follow)(dst, st.st_flags, follow_symlinks=follow)
		except NotImplementedError:
			pass
		except OSError as e:
			if e.errno not in _UNSUPPORTED:
				raise MetadataUpdateError("Could not update file flags", dst) from e

def _resolve_dst(src:str, dst:str) -> str:
	if os.path.isdir(dst):
		return os.path.join(dst, os.path.basename(src))
	return dst

def copy(src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
	'''Copy data and permission bits ("cp src dst") and return the file's destination. `dst` may be a directory.'''

	src = os.fspath(src)
	dst = _resolve_dst(src, os.fspath(dst))
	copy_file(src, dst, options)
	copy_mode(src, dst, options)
	return dst

def copy2(src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
	'''
	Copy data and all stat info ("cp -p src dst") and return the file's destination.

	The destination may be a directory, in which case the file is copied into it under its own name. If `options.follow_symlinks` is `False`, symlinks are not followed, like GNU's "cp -P src dst".
	'''

	src = os.fspath(src)
	dst = _resolve_dst(src, os.fspath(dst))
	copy_file(src, dst, options)
	copy_stat(src, dst, options)
	return dst

class CopyStrategy:
	'''Abstract base class for the per-file copy strategies used by `copy_tree()`.'''

	def copy(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		'''(Abstract method) Copy the file `src` to `dst` and return the final destination.'''

		raise NotImplementedError()

	def __call__(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		return self.copy(src, dst, options)

	def __eq__(self, other):
		return type(self) is type(other)

	def __hash__(self):
		return hash(type(self))

	def __repr__(self):
		return f"{type(self).__name__}()"

class CopyFileStrategy(CopyStrategy):
	'''Copy file contents only.'''

	def copy(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		return copy_file(src, dst, options)

class CopyModeStrategy(CopyStrategy):
	'''Copy file contents and permission bits.'''

	def copy(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		return copy(src, dst, options)

class Copy2Strategy(CopyStrategy):
	'''Copy file contents and all metadata. This is the default strategy of `copy_tree()`.'''

	def copy(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		return copy2(src, dst, options)

class FunctionStrategy(CopyStrategy):
	'''Adapts a plain function with the signature of `copy_file()`.'''

	def __init__(self, func:CopyFunction):
		if not callable(func):
			raise TypeError(f"Bad type for arg 'func' (expected callable): {func}")
		self.func = func

	def copy(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		return self.func(src, dst, options)

	def __eq__(self, other):
		return isinstance(other, FunctionStrategy) and self.func == other.func

	def __hash__(self):
		return hash(self.func)

	def __repr__(self):
		return f"FunctionStrategy({self.func!r})"
