import os
import stat

def _is_fifo(st) -> bool:
	'''
	Returns `True` if the stat-like object `st` describes a named pipe.

	>>> from collections import namedtuple
	>>> St = namedtuple("St", ["st_mode"])
	>>> _is_fifo(St(stat.S_IFIFO | 0o644))
	True
	>>> _is_fifo(St(stat.S_IFREG | 0o644))
	False
	'''

	return stat.S_ISFIFO(st.st_mode)

def _samefile(src:str, dst:str) -> bool:
	'''Returns `True` if `src` and `dst` name the same underlying file (device and inode), following symlinks. Paths that cannot be stat'd are never the same file.'''

	try:
		return os.path.samestat(os.stat(src), os.stat(dst))
	except OSError:
		return False

def _dir_id(st) -> tuple[int, int]:
	'''
	Identity of a directory, used to detect symlink loops.

	>>> from collections import namedtuple
	>>> St = namedtuple("St", ["st_dev", "st_ino"])
	>>> _dir_id(St(3, 42))
	(3, 42)
	'''

	return (st.st_dev, st.st_ino)

def _strip_nt_prefix(target:str) -> str:
	r'''
	Drop the extended-length prefix that Windows adds to some symlink targets.

	>>> _strip_nt_prefix("\\\\?\\C:\\data")
	'C:\\data'
	>>> _strip_nt_prefix("\\??\\C:\\data")
	'C:\\data'
	>>> _strip_nt_prefix("../data")
	'../data'
	'''

	if target.startswith("\\\\?\\") or target.startswith("\\??\\"):
		return target[4:]
	return target

def _readlink(path:str) -> str:
	'''Read the target of the symlink at `path`.'''

	target = os.readlink(path)
	if os.name == "nt":
		target = _strip_nt_prefix(target)
	return target
