"""Storage utilities for project files."""

from cloudship.storage.descriptor import DESCRIPTOR_FILE, parse_descriptor, render_descriptor
from cloudship.storage.files import read_text, write_atomic

__all__ = ["DESCRIPTOR_FILE", "parse_descriptor", "read_text", "render_descriptor", "write_atomic"]
