"""Decoders for ingesting rate feeds."""

from importers.rate_feed_decoder import DecodeError, DecodeErrorKind, decode_line

__all__ = ["DecodeError", "DecodeErrorKind", "decode_line"]
