import io

import pytest

import Data_Incoder
from Data_Decoder import decode, decompress_stream
from Data_Incoder import encode, encode_stream
from Huffman_Errors import (
    CorruptPayloadError, CorruptTreeError, EmptyInputError, HuffmanIOError, InputTooLargeError,
    UnknownSymbolError,
)
from Huffman_Tree import build_tree, build_tree_from_text
from Tree_Codec import deserialize_tree, serialize_tree


def _roundtrip(write_file, tmp_path, data: bytes) -> bytes:
    src = write_file("src.bin", data)
    comp, out = tmp_path / "src.huff", tmp_path / "src.out"
    encode(build_tree_from_text(src), src, comp)
    decode(None, comp, out)
    return out.read_bytes()


@pytest.mark.parametrize("data", [
    b"a",
    b"ab",
    b"aaaa",
    b"aaaabbbcc",
    bytes(range(256)),
    b"\x00" * 3001,
    b"the quick brown fox jumps over the lazy dog " * 200,
])
def test_roundtrip(write_file, tmp_path, data):
    assert _roundtrip(write_file, tmp_path, data) == data


def test_roundtrip_random(write_file, tmp_path, rng):
    data = bytes(rng.getrandbits(8) for _ in range(10 * 1024))
    assert _roundtrip(write_file, tmp_path, data) == data


def test_roundtrip_skewed(write_file, tmp_path, rng):
    data = bytes(rng.choices(range(8), weights=(500, 200, 100, 50, 20, 5, 2, 1), k=5000))
    assert _roundtrip(write_file, tmp_path, data) == data


def test_aaaabbbcc_file_layout(write_file, tmp_path):
    src = write_file("in.txt", b"aaaabbbcc")
    comp = tmp_path / "in.huff"
    encode(build_tree_from_text(src), src, comp)
    raw = comp.read_bytes()
    assert raw[:4] == (3).to_bytes(4, 'big')
    assert raw[4:8] == (9).to_bytes(4, 'big')
    # 29 tree bits → 4 bytes; payload a a a a b b b c c = 0000 111111 1010 → 2 bytes
    assert len(raw) == 8 + 4 + 2
    assert raw[-2:] == bytes([0b00001111, 0b11101000])


def test_degenerate_alphabet(write_file, tmp_path):
    src = write_file("a.txt", b"aaaa")
    tree = build_tree_from_text(src)
    assert tree.root.is_leaf
    comp, out = tmp_path / "a.huff", tmp_path / "a.out"
    encode(tree, src, comp)
    assert comp.read_bytes()[4:8] == (4).to_bytes(4, 'big')
    decode(tree, comp, out)
    assert out.read_bytes() == b"aaaa"


def test_padding_not_decoded(write_file, tmp_path):
    # one 'a' is a single 0 bit; the 7 zero padding bits must not become 'a's
    src = write_file("s.txt", b"abbbbbbbb")
    assert _roundtrip(write_file, tmp_path, src.read_bytes()) == b"abbbbbbbb"


def test_encode_stream_returns_count():
    tree = build_tree({1: 2, 2: 1})
    dst = io.BytesIO()
    assert encode_stream(tree, io.BytesIO(b"\x01\x02\x01"), dst) == 3
    dst.seek(0)
    out = io.BytesIO()
    assert decompress_stream(dst, out) == 3
    assert out.getvalue() == b"\x01\x02\x01"


def test_encode_empty_input(write_file, tmp_path):
    src = write_file("empty", b"")
    with pytest.raises(EmptyInputError):
        encode(build_tree({1: 1}), src, tmp_path / "out")


def test_encode_unknown_symbol(write_file, tmp_path):
    src = write_file("x", b"abc")
    with pytest.raises(UnknownSymbolError) as exc:
        encode(build_tree({ord('a'): 1, ord('b'): 1}), src, tmp_path / "out")
    assert exc.value.sym == ord('c')


def test_encode_missing_input(tmp_path):
    with pytest.raises(HuffmanIOError) as exc:
        encode(build_tree({1: 1}), tmp_path / "missing", tmp_path / "out")
    assert exc.value.operation == 'open input'


def test_decode_missing_input(tmp_path):
    with pytest.raises(HuffmanIOError):
        decode(None, tmp_path / "missing", tmp_path / "out")


def test_truncated_payload(write_file, tmp_path):
    src = write_file("in.txt", b"aaaabbbcc")
    comp = tmp_path / "in.huff"
    encode(build_tree_from_text(src), src, comp)
    comp.write_bytes(comp.read_bytes()[:-1])
    with pytest.raises(CorruptPayloadError):
        decode(None, comp, tmp_path / "out")


def test_truncated_degenerate_payload(write_file, tmp_path):
    src = write_file("a.txt", b"aaaa")
    comp = tmp_path / "a.huff"
    encode(build_tree_from_text(src), src, comp)
    comp.write_bytes(comp.read_bytes()[:-1])
    with pytest.raises(CorruptPayloadError):
        decode(None, comp, tmp_path / "out")


def test_truncated_large_payload(write_file, tmp_path, rng):
    data = bytes(rng.getrandbits(8) for _ in range(4000))
    src = write_file("r.bin", data)
    comp = tmp_path / "r.huff"
    encode(build_tree_from_text(src), src, comp)
    comp.write_bytes(comp.read_bytes()[:-1])
    with pytest.raises(CorruptPayloadError):
        decode(None, comp, tmp_path / "out")


def test_corrupt_header(tmp_path):
    comp = tmp_path / "bad.huff"
    comp.write_bytes(b"\x00\x00")
    with pytest.raises(CorruptTreeError):
        decode(None, comp, tmp_path / "out")


def test_compressed_file_holds_tree(write_file, tmp_path):
    src = write_file("t.txt", b"mississippi")
    tree = build_tree_from_text(src)
    comp = tmp_path / "t.huff"
    encode(tree, src, comp)
    assert deserialize_tree(comp).leaves == tree.leaves


def test_encode_is_deterministic(write_file, tmp_path):
    src = write_file("d.txt", b"abracadabra" * 50)
    a, b = tmp_path / "a.huff", tmp_path / "b.huff"
    encode(build_tree_from_text(src), src, a)
    encode(build_tree_from_text(src), src, b)
    assert a.read_bytes() == b.read_bytes()


def test_decode_tree_file_is_not_a_payload(tmp_path):
    tree_file, out = tmp_path / "t.tree", tmp_path / "out"
    serialize_tree(build_tree({97: 3, 98: 1}), tree_file)
    with pytest.raises(CorruptPayloadError, match="no payload"):
        decode(None, tree_file, out)


def test_input_longer_than_header_count(monkeypatch):
    monkeypatch.setattr(Data_Incoder, 'MAX_COUNT', 10)
    tree = build_tree({1: 1})
    assert encode_stream(tree, io.BytesIO(b"\x01" * 10), io.BytesIO()) == 10
    with pytest.raises(InputTooLargeError):
        encode_stream(tree, io.BytesIO(b"\x01" * 11), io.BytesIO())
