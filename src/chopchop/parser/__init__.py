"""Parser package - Signature file loading."""

from chopchop.parser.signatures import load_signatures, parse_signatures

__all__ = ["load_signatures", "parse_signatures"]
