"""Line sources: files and standard input."""
from .service import read_strings_from, read_strings_from_file, read_strings_from_stdin

__all__ = ["read_strings_from", "read_strings_from_file", "read_strings_from_stdin"]
