# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

import os
from typing import Any, Callable, Iterable, Protocol, TypeAlias, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
	from .config import CopyOptions

StrPath: TypeAlias = str | os.PathLike[str]

@runtime_checkable
class CopyFunction(Protocol):
	'''Protocol for plain functions with the signature of `copy_file()`, usable as a `copy_function`.'''

	def __call__(self, src:StrPath, dst:StrPath, options:"CopyOptions|None" = None) -> str:
		...

@runtime_checkable
class IgnoreFunction(Protocol):
	'''Protocol for plain functions usable as an `ignore` callback: given a directory and its entries, return the names to skip.'''

	def __call__(self, src:str, entries:list[os.DirEntry]) -> Iterable[str]:
		...

@runtime_checkable
class ErrorHandler(Protocol):
	'''Protocol for `rm_tree()` error handlers. `func` is the `os` function that failed on `path`.'''

	def __call__(self, func:Callable[..., Any], path:str, exc:BaseException) -> None:
		...
