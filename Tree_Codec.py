"""
Tree codec and compressed-file header
=====================================
File format
-----------
• [distinct symbols 4][encoded symbols 4]   (big-endian)
• [tree bits, pre-order, zero-padded to a byte]
• [payload bits, zero-padded to a byte]

Tree bits: leaf → 0 + 8-bit symbol, internal → 1 + left + right.
A standalone tree file (`serialize_tree`) is the same header with an
encoded-symbol count of 0 and no payload.
"""

import logging
from typing import BinaryIO, Tuple

from Bit_Stream import BitReader, BitWriter
from Huffman_Errors import CorruptTreeError, HuffmanIOError
from Huffman_Tree import MAX_SYMBOLS, Tree, internal, leaf

logger = logging.getLogger(__name__)

HEADER_SIZE = 8
MAX_DEPTH = MAX_SYMBOLS - 1
MAX_COUNT = 2 ** 32 - 1     # largest encoded-symbol count a 4-byte header holds

# ---------- header ----------

def write_header(stream: BinaryIO, leaves: int, count: int) -> None:
    stream.write(leaves.to_bytes(4, 'big') + count.to_bytes(4, 'big'))


def read_header(stream: BinaryIO) -> Tuple[int, int]:
    raw = stream.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise CorruptTreeError(f"header truncated ({len(raw)} of {HEADER_SIZE} bytes)")
    leaves = int.from_bytes(raw[:4], 'big')
    count = int.from_bytes(raw[4:], 'big')
    if not 1 <= leaves <= MAX_SYMBOLS:
        raise CorruptTreeError(f"header declares {leaves} distinct symbols")
    return leaves, count

# ---------- tree bits ----------

def write_tree(writer: BitWriter, tree: Tree) -> None:
    stack = [tree.root]
    while stack:
        node = stack.pop()
        if node.is_leaf:
            writer.write_bit(0)
            writer.write_uint(node.sym, 8)
        else:
            writer.write_bit(1)
            stack.append(node.right)
            stack.append(node.left)
    writer.align()


def read_tree(reader: BitReader, leaves: int) -> Tree:
    seen = set()

    def read_node(depth):
        flag = reader.read_bit()
        if flag is None:
            raise CorruptTreeError("tree bits end mid-traversal")
        if flag == 0:
            sym = reader.read_uint(8)
            if sym is None:
                raise CorruptTreeError("tree bits end inside a leaf symbol")
            if sym in seen:
                raise CorruptTreeError(f"symbol 0x{sym:02x} appears in two leaves")
            seen.add(sym)
            return leaf(sym)
        if depth >= MAX_DEPTH:
            raise CorruptTreeError(f"tree deeper than {MAX_DEPTH} levels")
        left = read_node(depth + 1)
        right = read_node(depth + 1)
        return internal(left, right)

    root = read_node(0)
    reader.align()
    if len(seen) != leaves:
        raise CorruptTreeError(f"tree has {len(seen)} leaves, header declares {leaves}")
    logger.debug("read tree with %d leaves", leaves)
    return Tree(root, leaves)

# ---------- tree files ----------

def serialize_tree(tree: Tree, path) -> None:
    try:
        with open(path, 'wb') as f:
            write_header(f, tree.leaves, 0)
            writer = BitWriter(f)
            write_tree(writer, tree)
            writer.flush()
    except OSError as e:
        raise HuffmanIOError('write tree', path, e) from e


def deserialize_tree(path) -> Tree:
    """Load the tree from a tree file or from a compressed file's header."""
    try:
        with open(path, 'rb') as f:
            leaves, _ = read_header(f)
            return read_tree(BitReader(f), leaves)
    except OSError as e:
        raise HuffmanIOError('read tree', path, e) from e
