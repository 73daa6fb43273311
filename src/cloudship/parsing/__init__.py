"""Parsers for project source files."""

from cloudship.parsing.dockerfile import exposed_port
from cloudship.parsing.worker import defines_class, exported_classes, insert_class

__all__ = ["defines_class", "exported_classes", "exposed_port", "insert_class"]
