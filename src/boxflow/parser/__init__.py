"""Structural tree model and JSON loader."""

from boxflow.parser.structure import load_document, parse_document

__all__ = ["load_document", "parse_document"]
