"""
Huffman encoder
===============
tree + original bytes → [header][tree][payload]

The symbol count is only known once the input has been streamed, so the
header is written with a placeholder and patched at the end.
"""

import logging
from typing import BinaryIO

from Bit_Stream import BitWriter
from Huffman_Errors import EmptyInputError, HuffmanIOError, InputTooLargeError, UnknownSymbolError
from Huffman_Tree import CHUNK_SIZE, Tree, code_table
from Tree_Codec import MAX_COUNT, write_header, write_tree

logger = logging.getLogger(__name__)


def encode_stream(tree: Tree, src: BinaryIO, dst: BinaryIO) -> int:
    """Write the compressed form of `src` to a seekable `dst`; return symbols encoded."""
    codes = code_table(tree)
    start = dst.tell()
    write_header(dst, tree.leaves, 0)
    writer = BitWriter(dst)
    write_tree(writer, tree)

    total = 0
    while True:
        chunk = src.read(CHUNK_SIZE)
        if not chunk:
            break
        if total + len(chunk) > MAX_COUNT:
            raise InputTooLargeError(f"input exceeds {MAX_COUNT:,} bytes, the header limit")
        for b in chunk:
            try:
                writer.write_bits(codes[b])
            except KeyError:
                raise UnknownSymbolError(b) from None
        total += len(chunk)
    if not total:
        raise EmptyInputError("input is empty, nothing to encode")
    writer.flush()

    end = dst.tell()
    dst.seek(start)
    write_header(dst, tree.leaves, total)
    dst.seek(end)
    logger.debug("encoded %d symbols into %d bytes", total, end - start)
    return total


def encode(tree: Tree, from_path, to_path) -> None:
    try:
        src = open(from_path, 'rb')
    except OSError as e:
        raise HuffmanIOError('open input', from_path, e) from e
    with src:
        try:
            dst = open(to_path, 'wb')
        except OSError as e:
            raise HuffmanIOError('open output', to_path, e) from e
        with dst:
            try:
                encode_stream(tree, src, dst)
            except OSError as e:
                raise HuffmanIOError('encode', f"{from_path} -> {to_path}", e) from e
