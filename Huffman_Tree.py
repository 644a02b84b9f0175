"""
Huffman tree construction
=========================
frequency count → priority queue → greedy merge → code table

Tie-break rule: equal counts pop in insertion order. Leaves are pushed in
ascending symbol order and every merged node is pushed after its children,
so a given frequency mapping always yields the same tree.
"""

import heapq
import logging
from collections import namedtuple
from itertools import count as _counter
from pathlib import Path
from typing import BinaryIO, Dict

import numpy as np

from Huffman_Errors import EmptyInputError, HuffmanIOError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1000   # bytes per read/write for every streaming pass
MAX_SYMBOLS = 256

# -------------------------------------------------
# 0. NODE / TREE
# -------------------------------------------------
Node = namedtuple('Node', 'count sym left right')


class HuffNode(Node):
    __slots__ = ()

    @property
    def is_leaf(self) -> bool:
        return self.sym is not None


def leaf(sym: int, count: int = 0) -> HuffNode:
    return HuffNode(count, sym, None, None)


def internal(left: HuffNode, right: HuffNode) -> HuffNode:
    return HuffNode(left.count + right.count, None, left, right)


Tree = namedtuple('Tree', 'root leaves')

# -------------------------------------------------
# 1. FREQUENCY COUNTER
# -------------------------------------------------

def count_frequencies(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Dict[int, int]:
    """Histogram of a byte stream, only non-zero symbols, ascending by symbol."""
    hist = np.zeros(MAX_SYMBOLS, dtype=np.int64)
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        hist += np.bincount(np.frombuffer(chunk, dtype=np.uint8), minlength=MAX_SYMBOLS)
    if not hist.any():
        raise EmptyInputError("input is empty, no tree can be built")
    return {int(sym): int(hist[sym]) for sym in np.flatnonzero(hist)}


def count_file(path) -> Dict[int, int]:
    try:
        with open(path, 'rb') as f:
            return count_frequencies(f)
    except OSError as e:
        raise HuffmanIOError('read', path, e) from e

# -------------------------------------------------
# 2. PRIORITY QUEUE
# -------------------------------------------------

def count_then_sequence(node: HuffNode, seq: int):
    return node.count, seq


class NodeQueue:
    """Binary min-heap of nodes; `order(node, seq)` supplies the sort key."""

    def __init__(self, order=count_then_sequence):
        self._order = order
        self._heap = []
        self._seq = _counter()

    def push(self, node: HuffNode) -> None:
        seq = next(self._seq)
        heapq.heappush(self._heap, (self._order(node, seq), seq, node))

    def pop(self) -> HuffNode:
        return heapq.heappop(self._heap)[-1]

    def __len__(self) -> int:
        return len(self._heap)

# -------------------------------------------------
# 3. TREE BUILDER
# -------------------------------------------------

def build_tree(freqs: Dict[int, int], order=count_then_sequence) -> Tree:
    if not freqs:
        raise EmptyInputError("no symbols to build a tree from")
    queue = NodeQueue(order)
    for sym in sorted(freqs):
        queue.push(leaf(sym, freqs[sym]))
    while len(queue) > 1:
        a, b = queue.pop(), queue.pop()
        queue.push(internal(a, b))
    tree = Tree(queue.pop(), len(freqs))
    logger.debug("built tree: %d symbols, %d total", tree.leaves, tree.root.count)
    return tree


def build_tree_from_text(path) -> Tree:
    return build_tree(count_file(Path(path)))

# -------------------------------------------------
# 4. CODE TABLE
# -------------------------------------------------

def code_table(tree: Tree) -> Dict[int, str]:
    """symbol → '0'/'1' code string; a lone root leaf gets '0'."""
    if tree.root.is_leaf:
        return {tree.root.sym: '0'}
    cmap = {}
    stack = [(tree.root, '')]
    while stack:
        node, prefix = stack.pop()
        if node.is_leaf:
            cmap[node.sym] = prefix
        else:
            stack.append((node.right, prefix + '1'))
            stack.append((node.left, prefix + '0'))
    return cmap
