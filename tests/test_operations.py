# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import io
import os
import stat
import unittest
import logging
import tempfile
from pathlib import Path
from unittest import mock

from pshutil import operations, config, errors
from .helpers import *

logger = logging.getLogger("pshutil.tests")

_NO_FOLLOW = config.CopyOptions(follow_symlinks=False)

class TestCopyFile(unittest.TestCase):

	def test_copy2__content(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			for i, content in enumerate(["", "a", "abc\n" * 1000, "x" * (operations.COPY_BUFSIZE + 1)]):
				src = root / f"src{i}.txt"
				dst = root / f"dst{i}.txt"
				src.write_text(content)
				ret = operations.copy2(src, dst)
				self.assertEqual(ret, str(dst))
				self.assertEqual(dst.read_text(), content)

	def test_copy_file__overwrites(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "src.txt"
			dst = root / "dst.txt"
			src.write_text("new")
			dst.write_text("old content")
			operations.copy_file(src, dst)
			self.assertEqual(dst.read_text(), "new")

	def test_copy_file__same_path(self):
		with tempfile.TemporaryDirectory() as temp_root:
			src = Path(temp_root) / "a.txt"
			src.write_text("abc")
			with self.assertRaises(errors.SameFileError) as cm:
				operations.copy_file(src, src)
			self.assertEqual(cm.exception.src, str(src))
			self.assertEqual(cm.exception.dst, str(src))
			self.assertIsInstance(cm.exception, FileExistsError)
			self.assertEqual(src.read_text(), "abc")

	@unittest.skipUnless(hasattr(os, "link"), "hard links not supported")
	def test_copy_file__hard_link(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			dst = root / "b.txt"
			src.write_text("abc")
			os.link(src, dst)
			with self.assertRaises(errors.SameFileError):
				operations.copy_file(src, dst)
			self.assertEqual(dst.read_text(), "abc")

	@unittest.skipUnless(hasattr(os, "mkfifo"), "named pipes not supported")
	def test_copy_file__fifo(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			fifo = root / "pipe"
			os.mkfifo(fifo)

			dst = root / "dst"
			with self.assertRaises(errors.SpecialFileError) as cm:
				operations.copy_file(fifo, dst)
			self.assertEqual(cm.exception.file, str(fifo))
			self.assertFalse(os.path.lexists(dst))

			src = root / "a.txt"
			src.write_text("abc")
			with self.assertRaises(errors.SpecialFileError) as cm:
				operations.copy_file(src, fifo)
			self.assertEqual(cm.exception.file, str(fifo))

	def test_copy_file__short_write(self):
		real_open = open
		class HalfWriter(io.RawIOBase):
			def __init__(self, raw):
				super().__init__()
				self.raw = raw
			def writable(self):
				return True
			def write(self, b):
				return self.raw.write(bytes(b)[:len(b) // 2])
			def close(self):
				self.raw.close()
				super().close()
		def half_open(file, mode="r", *args, **kwargs):
			f = real_open(file, mode, *args, **kwargs)
			return HalfWriter(f) if "w" in mode else f

		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.bin"
			dst = root / "b.bin"
			src.write_bytes(b"x" * 100)
			with mock.patch("pshutil.operations.open", half_open, create=True):
				with TempLoggingLevel(logging.getLogger("pshutil"), logging.CRITICAL):
					with self.assertRaises(errors.CopyNotCompleteError) as cm:
						operations.copy_file(src, dst)
			self.assertEqual(cm.exception.copied, 50)
			self.assertEqual(cm.exception.expected, 100)
			self.assertEqual(cm.exception.filename, str(src))
			self.assertEqual(cm.exception.filename2, str(dst))
			self.assertEqual(os.path.getsize(dst), 50)

	def test_copy_file__missing_src(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			with self.assertRaises(FileNotFoundError):
				operations.copy_file(root / "missing", root / "dst")
			self.assertFalse(os.path.lexists(root / "dst"))

	@unittest.skipUnless(can_symlink(), "symlinks not supported")
	def test_copy_file__symlink(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			(root / "target.txt").write_text("abc")
			link = root / "link"
			os.symlink("target.txt", link)

			dst = root / "copied_link"
			operations.copy_file(link, dst, _NO_FOLLOW)
			self.assertTrue(os.path.islink(dst))
			self.assertEqual(readlink(dst), "target.txt")

			dst = root / "copied_file"
			operations.copy_file(link, dst)
			self.assertFalse(os.path.islink(dst))
			self.assertEqual(dst.read_text(), "abc")

class TestCopyStat(unittest.TestCase):

	def test_copy_stat__mtime(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			dst = root / "b.txt"
			src.write_text("abc")
			dst.write_text("abc")
			os.utime(src, (1_000_000_000, 1_000_000_000))
			operations.copy_stat(src, dst)
			self.assertEqual(int(os.stat(dst).st_mtime), 1_000_000_000)
			self.assertEqual(int(os.stat(dst).st_atime), 1_000_000_000)

	@unittest.skipIf(os.name == "nt", "permission bits are not fully supported")
	def test_copy_stat__mode(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			dst = root / "b.txt"
			src.write_text("abc")
			dst.write_text("abc")
			os.chmod(src, 0o640)
			os.chmod(dst, 0o600)
			operations.copy_stat(src, dst)
			self.assertEqual(stat.S_IMODE(os.stat(dst).st_mode), 0o640)

	@unittest.skipIf(os.name == "nt", "permission bits are not fully supported")
	def test_copy_mode(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			dst = root / "b.txt"
			src.write_text("abc")
			dst.write_text("abc")
			os.utime(dst, (1_000_000_000, 1_000_000_000))
			os.chmod(src, 0o604)
			operations.copy_mode(src, dst)
			self.assertEqual(stat.S_IMODE(os.stat(dst).st_mode), 0o604)
			self.assertEqual(int(os.stat(dst).st_mtime), 1_000_000_000)

	def test_copy_stat__missing_src(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			dst = root / "b.txt"
			dst.write_text("abc")
			with self.assertRaises(FileNotFoundError):
				operations.copy_stat(root / "missing", dst)

	def test_copy_stat__missing_dst(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			src.write_text("abc")
			with self.assertRaises(errors.MetadataUpdateError):
				operations.copy_stat(src, root / "missing")

	@unittest.skipUnless(can_symlink(), "symlinks not supported")
	def test_copy_stat__symlinks_not_followed(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			(root / "t1").write_text("a")
			(root / "t2").write_text("b")
			os.utime(root / "t1", (1_000_000_000, 1_000_000_000))
			os.utime(root / "t2", (1_500_000_000, 1_500_000_000))
			os.symlink("t1", root / "l1")
			os.symlink("t2", root / "l2")
			operations.copy_stat(root / "l1", root / "l2", _NO_FOLLOW)
			# the target of l2 is left alone
			self.assertEqual(int(os.stat(root / "t2").st_mtime), 1_500_000_000)

class TestCopy(unittest.TestCase):

	def test_copy2__into_dir(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			src.write_text("abc")
			os.utime(src, (1_000_000_000, 1_000_000_000))
			(root / "d").mkdir()
			ret = operations.copy2(src, root / "d")
			self.assertEqual(ret, str(root / "d" / "a.txt"))
			self.assertEqual((root / "d" / "a.txt").read_text(), "abc")
			self.assertEqual(int(os.stat(ret).st_mtime), 1_000_000_000)

	def test_copy__into_dir(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			src.write_text("abc")
			(root / "d").mkdir()
			ret = operations.copy(src, root / "d")
			self.assertEqual(ret, str(root / "d" / "a.txt"))
			self.assertEqual((root / "d" / "a.txt").read_text(), "abc")

class TestStrategies(unittest.TestCase):

	def test_equality(self):
		self.assertEqual(operations.Copy2Strategy(), operations.Copy2Strategy())
		self.assertNotEqual(operations.Copy2Strategy(), operations.CopyFileStrategy())
		self.assertEqual(operations.FunctionStrategy(operations.copy_file), operations.FunctionStrategy(operations.copy_file))
		self.assertEqual(repr(operations.CopyModeStrategy()), "CopyModeStrategy()")

	def test_function_strategy(self):
		calls = []
		def copy_function(src, dst, options=None):
			calls.append((src, dst))
			return dst
		strategy = operations.FunctionStrategy(copy_function)
		self.assertEqual(strategy("a", "b"), "b")
		self.assertEqual(calls, [("a", "b")])

		with self.assertRaises(TypeError):
			operations.FunctionStrategy(1)

	def test_base_strategy(self):
		with self.assertRaises(NotImplementedError):
			operations.CopyStrategy().copy("a", "b")

	def test_copy_file_strategy(self):
		with tempfile.TemporaryDirectory() as temp_root:
			root = Path(temp_root)
			src = root / "a.txt"
			src.write_text("abc")
			os.utime(src, (1_000_000_000, 1_000_000_000))
			dst = operations.CopyFileStrategy().copy(src, root / "b.txt")
			self.assertEqual(Path(dst).read_text(), "abc")
			self.assertNotEqual(int(os.stat(dst).st_mtime), 1_000_000_000)
