import errno
from collections import namedtuple
from typing import Iterator

from .log import _exc_summary

CopyFailure = namedtuple("CopyFailure", ["src", "dst", "error"])

class SameFileError(FileExistsError):
	'''Indicates that the source and destination of a copy are the same underlying file.'''
	def __init__(self, src, dst):
		super().__init__(errno.EEXIST, "Source and destination are the same file", str(src), None, str(dst))
		self.src = str(src)
		self.dst = str(dst)

class SpecialFileError(OSError):
	'''Indicates an attempt to copy from or onto a named pipe.'''
	def __init__(self, file):
		super().__init__(errno.EINVAL, "Cannot copy a named pipe", str(file))
		self.file = str(file)

class CopyNotCompleteError(OSError):
	'''Indicates that fewer bytes were written to the destination than the source reported.'''
	def __init__(self, src, dst, copied:int = -1, expected:int = -1):
		super().__init__(errno.EIO, f"Copy not complete ({copied}/{expected} bytes)", str(src), None, str(dst))
		self.src      = str(src)
		self.dst      = str(dst)
		self.copied   = copied
		self.expected = expected

class MetadataUpdateError(PermissionError):
	'''Indicates a problem with updating file metadata (e.g., mtime) after a successful copy.'''
	def __init__(self, strerror=None, filename=None):
		super().__init__(1, strerror, filename)

class BrokenSymlinkError(FileNotFoundError):
	'''Indicates a problem with a symlink's target path.'''
	def __init__(self, strerror=None, filename=None):
		super().__init__(2, strerror, filename)

class CopyTreeError(OSError):
	'''
	Aggregate error raised by `copy_tree()` once the whole tree has been visited.

	`failures` holds one `CopyFailure(src, dst, error)` per entry that could not be copied, in the order they were met.

	>>> e = CopyTreeError("a", [CopyFailure("a/x", "b/x", SpecialFileError("a/x"))])
	>>> str(e)
	"[Errno 5] 1 error(s) while copying tree: 'a'"
	>>> list(e.summary())
	['a/x -> b/x: SpecialFileError: a/x']
	'''
	def __init__(self, src, failures:list[CopyFailure]):
		super().__init__(errno.EIO, f"{len(failures)} error(s) while copying tree", str(src))
		self.src      = str(src)
		self.failures = list(failures)

	def summary(self) -> Iterator[str]:
		'''One line per recorded failure.'''
		for src, dst, error in self.failures:
			yield f"{src} -> {dst}: {_exc_summary(error)}"
