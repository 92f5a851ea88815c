# Copyright (c) 2025 Joe Walter
# GNU General Public License v3.0

from .core import copy_tree, rm_tree
from .operations import copy_file, copy_stat, copy_mode, copy, copy2, CopyStrategy, CopyFileStrategy, CopyModeStrategy, Copy2Strategy, FunctionStrategy
from .config import CopyOptions, CopyTreeOptions, RmTreeOptions
from .filter import Ignore, PatternIgnore, FunctionIgnore, ignore_patterns
from .errors import CopyFailure, SameFileError, SpecialFileError, CopyNotCompleteError, CopyTreeError, BrokenSymlinkError, MetadataUpdateError

__all__ = [
	"copy_tree",
	"rm_tree",
	"copy_file",
	"copy_stat",
	"copy_mode",
	"copy",
	"copy2",
	"CopyStrategy",
	"CopyFileStrategy",
	"CopyModeStrategy",
	"Copy2Strategy",
	"FunctionStrategy",
	"CopyOptions",
	"CopyTreeOptions",
	"RmTreeOptions",
	"Ignore",
	"PatternIgnore",
	"FunctionIgnore",
	"ignore_patterns",
	"CopyFailure",
	"SameFileError",
	"SpecialFileError",
	"CopyNotCompleteError",
	"CopyTreeError",
	"BrokenSymlinkError",
	"MetadataUpdateError",
]
