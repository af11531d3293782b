"""
Embedpack runtime.

Imported by generated modules to serve their embedded records as a
read-only filesystem.

Usage:
    from embedpack.runtime import EmbeddedFS, FileRecord

    fs = EmbeddedFS([FileRecord(path="a/b.txt", content=b"hi", original_size=2, stored_size=2)])
    fs.read_file("a/b.txt")  # b"hi"
    fs.listdir("a")          # ["b.txt"]
"""

from .fs import Directory, EmbeddedFS, File, decode_record
from .records import FileInfo, FileRecord, ns_to_datetime
from .tree import DirectoryNode, Tree, build_tree

__all__ = [
    # Filesystem
    "EmbeddedFS",
    "File",
    "Directory",
    "decode_record",
    # Records
    "FileRecord",
    "FileInfo",
    "ns_to_datetime",
    # Tree
    "DirectoryNode",
    "Tree",
    "build_tree",
]
