# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
import hashlib
import tempfile
from pathlib import Path

class TempLoggingLevel:
	def __init__(self, logger, level):
		self.logger = logger
		self.level = level
	def __enter__(self):
		self.old_level = self.logger.level
		self.logger.setLevel(self.level)
	def __exit__(self, exc_type, exc_val, exc_tb):
		self.logger.setLevel(self.old_level)

def hash_directory(root:Path, *, follow_symlinks=False, include_mtime=False):
	'''Hash the names, contents, symlink targets and (optionally) mtimes of everything under `root`.'''
	hasher = hashlib.sha256()
	for dir, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
		dirnames.sort()
		filenames.sort()
		hasher.update(os.path.relpath(dir, root).encode())
		# symlinks to dirs are listed in dirnames by os.walk, hash them with the files
		names = filenames + [d for d in dirnames if not follow_symlinks and os.path.islink(os.path.join(dir, d))]
		for file in sorted(names):
			file_path = os.path.join(dir, file)
			hasher.update(os.path.relpath(file_path, root).encode())
			if not follow_symlinks and os.path.islink(file_path):
				hasher.update(readlink(file_path).replace("\\", "/").encode())
				continue
			if include_mtime:
				hasher.update(str(int(os.stat(file_path).st_mtime)).encode())
			with open(file_path, "rb") as f:
				while True:
					buf = f.read(4096)
					if not buf:
						break
					hasher.update(buf)
	return hasher.hexdigest()

def create_file_structure(root:Path, structure:dict, *, _symlinks:dict|None = None):
	'''Recursively creates a directory structure with files.'''
	root.mkdir(parents=True, exist_ok=True)
	if _symlinks is not None:
		symlinks = _symlinks
	else:
		symlinks = {}
	for name, content in structure.items():
		file_path = root / name
		if isinstance(content, Path):
			# create symlink
			symlinks[file_path] = content
		elif isinstance(content, dict):
			# create dir
			create_file_structure(file_path, content, _symlinks=symlinks)
		elif type(content) in (float, int):
			file_path.touch()
			mtime = float(content)
			os.utime(file_path, (mtime, mtime))
		elif isinstance(content, (tuple, list)):
			# Create file with modtime and content
			file_path.write_text(content[0] or "")
			mtime = float(content[1])
			os.utime(file_path, (mtime, mtime))
		elif content is None:
			# Create an empty file
			file_path.touch()
		else:
			# Create a file with content
			file_path.write_text(content)
	# On Windows, symlink type will be assumed to be "File" if the target does not exist
	# So, create symlinks after everything else
	if _symlinks is None:
		for path, target in symlinks.items():
			os.symlink(target, path, target_is_directory=(path.parent / target).is_dir())

def can_symlink() -> bool:
	with tempfile.TemporaryDirectory() as temp_root:
		try:
			os.symlink("a", os.path.join(temp_root, "b"))
		except (OSError, NotImplementedError):
			return False
	return True

def readlink(path:str|os.PathLike) -> str:
	link = os.readlink(path)
	if os.name == "nt" and (link.startswith("\\\\?\\") or link.startswith("\\??\\")):
		return link[4:]
	return link
