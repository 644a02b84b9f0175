"""
Huffman compressor errors
=========================
Every failure raised by the core derives from `HuffmanError`.
"""


class HuffmanError(Exception):
    pass


class EmptyInputError(HuffmanError):
    """Input has zero bytes, so no tree can be built."""


class UnknownSymbolError(HuffmanError):
    """Input holds a byte the tree has no code for."""

    def __init__(self, sym: int):
        super().__init__(f"byte 0x{sym:02x} is not encoded by the tree")
        self.sym = sym


class InputTooLargeError(HuffmanError):
    """Input length does not fit the header's 4-byte symbol count."""


class CorruptTreeError(HuffmanError):
    """Header or serialized tree is malformed."""


class CorruptPayloadError(HuffmanError):
    """Payload ended before the declared symbol count was decoded."""


class HuffmanIOError(HuffmanError, OSError):
    """Read/write failure, tagged with the operation and file involved."""

    def __init__(self, operation: str, path, cause=None):
        msg = f"{operation} failed for {path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        self.operation = operation
        self.path = str(path)
