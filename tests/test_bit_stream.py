import io

from Bit_Stream import BitReader, BitWriter


def test_writer_packs_msb_first_and_pads():
    out = io.BytesIO()
    w = BitWriter(out)
    w.write_bits('101')
    w.flush()
    assert out.getvalue() == bytes([0b10100000])


def test_writer_uint_and_align():
    out = io.BytesIO()
    w = BitWriter(out)
    w.write_bit(1)
    w.write_uint(0x41, 8)
    w.align()
    w.write_uint(0xFF, 8)
    w.flush()
    assert out.getvalue() == bytes([0b10100000, 0b10000000, 0xFF])
    assert w.bytes_written == 3


def test_writer_flushes_in_chunks():
    out = io.BytesIO()
    w = BitWriter(out, chunk_size=4)
    for _ in range(9):
        w.write_uint(0xAB, 8)
    # two full chunks on disk, one byte still buffered
    assert len(out.getvalue()) == 8
    w.flush()
    assert out.getvalue() == bytes([0xAB] * 9)


def test_reader_bits_then_eof():
    r = BitReader(io.BytesIO(bytes([0b11000001])), chunk_size=1)
    assert [r.read_bit() for _ in range(8)] == [1, 1, 0, 0, 0, 0, 0, 1]
    assert r.read_bit() is None


def test_reader_uint_across_chunks():
    r = BitReader(io.BytesIO(bytes([0x0F, 0xF0])), chunk_size=1)
    assert r.read_uint(4) == 0
    assert r.read_uint(8) == 0xFF
    assert r.read_uint(8) is None


def test_reader_align_skips_rest_of_byte():
    r = BitReader(io.BytesIO(bytes([0xFF, 0x00])))
    r.align()
    assert r.read_bit() == 1
    r.align()
    assert r.read_uint(8) == 0
    assert r.read_bit() is None


def test_writer_reader_agree():
    codes = ['0', '110', '10', '111111', '1']
    out = io.BytesIO()
    w = BitWriter(out, chunk_size=2)
    for c in codes * 50:
        w.write_bits(c)
    w.flush()
    r = BitReader(io.BytesIO(out.getvalue()), chunk_size=3)
    expected = ''.join(codes * 50)
    got = ''.join(str(r.read_bit()) for _ in expected)
    assert got == expected
