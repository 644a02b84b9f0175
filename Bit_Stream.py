"""
Bit-granular I/O over byte-granular files
=========================================
Bits are packed MSB first. Both sides keep at most `chunk_size` bytes
buffered; the writer zero-pads the final partial byte on `align()`/`flush()`.
"""

from typing import BinaryIO, Optional

from Huffman_Tree import CHUNK_SIZE


class BitWriter:
    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE):
        self.stream = stream
        self.chunk_size = chunk_size
        self._buf = bytearray()
        self._acc = 0       # pending bits, not yet a whole byte
        self._nbits = 0
        self.bytes_written = 0

    def write_bit(self, bit: int) -> None:
        self._acc = (self._acc << 1) | (bit & 1)
        self._nbits += 1
        if self._nbits == 8:
            self._push_byte()

    def write_bits(self, bits: str) -> None:
        """Append a '0'/'1' code string."""
        for b in bits:
            self.write_bit(b == '1')

    def write_uint(self, value: int, width: int) -> None:
        for shift in range(width - 1, -1, -1):
            self.write_bit((value >> shift) & 1)

    def align(self) -> None:
        """Zero-pad up to the next byte boundary."""
        if self._nbits:
            self._acc <<= 8 - self._nbits
            self._nbits = 8
            self._push_byte()

    def flush(self) -> None:
        self.align()
        if self._buf:
            self.stream.write(self._buf)
            self.bytes_written += len(self._buf)
            self._buf = bytearray()

    def _push_byte(self) -> None:
        self._buf.append(self._acc)
        self._acc = 0
        self._nbits = 0
        if len(self._buf) >= self.chunk_size:
            self.stream.write(self._buf)
            self.bytes_written += len(self._buf)
            self._buf = bytearray()


class BitReader:
    def __init__(self, stream: BinaryIO, chunk_size: int = CHUNK_SIZE):
        self.stream = stream
        self.chunk_size = chunk_size
        self._buf = b''
        self._pos = 0       # byte index into _buf
        self._bit = 8       # bits already consumed from _buf[_pos - 1]
        self._cur = 0

    def read_bit(self) -> Optional[int]:
        """Next bit, or None once the stream is exhausted."""
        if self._bit == 8:
            if self._pos == len(self._buf):
                self._buf = self.stream.read(self.chunk_size)
                self._pos = 0
                if not self._buf:
                    return None
            self._cur = self._buf[self._pos]
            self._pos += 1
            self._bit = 0
        self._bit += 1
        return (self._cur >> (8 - self._bit)) & 1

    def read_uint(self, width: int) -> Optional[int]:
        value = 0
        for _ in range(width):
            bit = self.read_bit()
            if bit is None:
                return None
            value = (value << 1) | bit
        return value

    def align(self) -> None:
        """Drop the rest of the current byte."""
        self._bit = 8
