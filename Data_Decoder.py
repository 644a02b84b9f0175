"""
Huffman decoder
===============
[header][tree][payload] → original bytes

Decoding stops after exactly the declared number of symbols, so the zero
bits padding the last byte are never mistaken for data.
"""

import logging
from typing import BinaryIO, Optional

from Bit_Stream import BitReader
from Huffman_Errors import CorruptPayloadError, HuffmanIOError
from Huffman_Tree import CHUNK_SIZE, Tree
from Tree_Codec import read_header, read_tree

logger = logging.getLogger(__name__)


def decode_stream(tree: Tree, reader: BitReader, count: int, dst: BinaryIO) -> None:
    root = tree.root
    out = bytearray()
    for emitted in range(count):
        node = root
        if node.is_leaf:
            # one-symbol alphabet: every symbol is a single bit
            if reader.read_bit() is None:
                raise CorruptPayloadError(f"payload ends after {emitted} of {count} symbols")
        while not node.is_leaf:
            bit = reader.read_bit()
            if bit is None:
                raise CorruptPayloadError(f"payload ends after {emitted} of {count} symbols")
            node = node.right if bit else node.left
        out.append(node.sym)
        if len(out) >= CHUNK_SIZE:
            dst.write(out)
            out = bytearray()
    if out:
        dst.write(out)


def decompress_stream(src: BinaryIO, dst: BinaryIO, tree: Optional[Tree] = None) -> int:
    """Decode a whole compressed stream; `tree` overrides the embedded one."""
    leaves, count = read_header(src)
    reader = BitReader(src)
    embedded = read_tree(reader, leaves)
    if count == 0:
        # tree files carry a zero count; compressed files never do
        raise CorruptPayloadError("file holds a tree but no payload")
    decode_stream(tree or embedded, reader, count, dst)
    logger.debug("decoded %d symbols", count)
    return count


def decode(tree: Optional[Tree], from_path, to_path) -> None:
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
                decompress_stream(src, dst, tree)
            except OSError as e:
                raise HuffmanIOError('decode', f"{from_path} -> {to_path}", e) from e
