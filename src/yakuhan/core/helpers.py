# SPDX-License-Identifier: Apache-2.0
"""ctypes conversions required by pypdfium2's raw API."""

import ctypes


def to_widestring(text: str) -> ctypes.Array:
    """Convert text to a null-terminated FPDF_WIDESTRING (UTF-16LE).

    Astral code points are written as surrogate pairs, as PDFium expects.
    """
    encoded = text.encode("utf-16-le") + b"\x00\x00"
    return (ctypes.c_ushort * (len(encoded) // 2)).from_buffer_copy(encoded)


def to_byte_array(data: bytes) -> ctypes.Array:
    """Copy font file bytes into a c_ubyte array PDFium can read from.

    The caller must keep the returned array alive for as long as the font
    handle created from it is in use.
    """
    return (ctypes.c_ubyte * len(data)).from_buffer_copy(data)
