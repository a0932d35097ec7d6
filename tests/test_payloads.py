"""
Tests for the loop-until-exhaustion payload decoders.
"""

import io
import struct
import sys

import numpy as np

import buffers
from petdata.binary_format import LITTLE_RAW, BIG_TRIMMED, RAW_RECORD_SIZE
from petdata.data_types import listmode_to_array, mich_to_array, raw_blocks
from petdata.field_reader import FieldReader
from petdata.payloads import (
    parse_raw_data, parse_listmode_data, parse_mich_data, MICH_CHUNK_RECORDS
)


def reader_for(data: bytes, profile=LITTLE_RAW) -> FieldReader:
    return FieldReader(io.BytesIO(data), profile)


def test_raw_data():
    """Test raw block decoding in input order"""
    print("Testing raw data...")

    data = b''.join(buffers.raw_record('<', fill, 0x0100 + fill) for fill in range(3))
    items = parse_raw_data(reader_for(data), "10.0.")

    assert len(items) == 3
    for fill, item in enumerate(items):
        assert len(item.data) == 1152
        assert item.data == bytes([fill]) * 1152
        assert item.ip == f"10.0.1.{fill}"

    blocks = raw_blocks(items)
    assert blocks.shape == (3, 1152)
    assert blocks.dtype == np.uint8
    assert int(blocks[2].max()) == 2
    assert raw_blocks(()).shape == (0, 1152)

    print("✓ Raw data")


def test_raw_data_trailing_partial_record():
    """Test that any remainder shorter than a record is dropped"""
    print("Testing raw data trailing bytes...")

    k = 2
    data = b''.join(buffers.raw_record('>', 0xAA, 0x0102) for _ in range(k))
    expected = parse_raw_data(reader_for(data, BIG_TRIMMED), "")
    assert len(expected) == k

    for extra in (1, 2, 100, 1151, 1152, RAW_RECORD_SIZE - 1):
        items = parse_raw_data(reader_for(data + b'\x07' * extra, BIG_TRIMMED), "")
        assert items == expected, f"extra={extra}"

    # The decoder consumed everything it could see
    reader = reader_for(data + b'\x07' * 5, BIG_TRIMMED)
    parse_raw_data(reader, "")
    assert reader.offset == len(data) + 5

    print("✓ Raw data trailing bytes")


def test_listmode_data():
    """Test list-mode event decoding and bit unpacking"""
    print("Testing listmode data...")

    data = (buffers.listmode_record('>', 0x0102, 0x8FFF, 511.0, 1.25)
            + buffers.listmode_record('>', 0x0A0B, 0x1000, 480.5, 2.5))
    items = parse_listmode_data(reader_for(data, BIG_TRIMMED), "ip-")

    assert len(items) == 2
    first, second = items
    assert first.ip == "ip-1.2"
    assert first.xtalk is True
    assert first.reserved == 0
    assert first.channel == 4095
    assert first.energy == 511.0
    assert first.time == 1.25

    assert second.ip == "ip-10.11"
    assert second.xtalk is False
    assert second.reserved == 1
    assert second.channel == 0

    events = listmode_to_array(items)
    assert events.shape == (2,)
    assert events['channel'].tolist() == [4095, 0]
    assert events['xtalk'].tolist() == [True, False]
    assert events['ip'].tolist() == ["ip-1.2", "ip-10.11"]

    print("✓ Listmode data")


def test_listmode_trailing_partial_record():
    data = buffers.listmode_record('<', 1, 2, 3.0, 4.0)
    for extra in range(1, 16):
        items = parse_listmode_data(reader_for(data + b'\x01' * extra), "")
        assert len(items) == 1


def test_mich_data():
    """Test Michelogram bins"""
    print("Testing mich data...")

    values = [0, 1, 65535, 300, 7]
    data = struct.pack('>5H', *values)
    bins = parse_mich_data(reader_for(data, BIG_TRIMMED))
    assert bins == tuple(values)

    array = mich_to_array(bins)
    assert array.dtype == np.uint16
    assert array.tolist() == values

    # Odd trailing byte is dropped
    bins = parse_mich_data(reader_for(struct.pack('<2H', 5, 6) + b'\x01'))
    assert bins == (5, 6)

    print("✓ Mich data")


def test_mich_data_across_chunks():
    """Test Michelogram bins spanning several read chunks"""
    print("Testing mich data across chunks...")

    count = MICH_CHUNK_RECORDS * 2 + 3
    values = np.arange(count, dtype=np.uint32) % 65536
    for profile in (LITTLE_RAW, BIG_TRIMMED):
        order = profile.byte_order.value
        data = values.astype(order + 'u2').tobytes() + b'\x09'
        reader = reader_for(data, profile)
        bins = parse_mich_data(reader)

        assert len(bins) == count
        assert bins[0] == 0
        assert bins[MICH_CHUNK_RECORDS] == MICH_CHUNK_RECORDS % 65536
        assert bins[-1] == (count - 1) % 65536
        assert bins == tuple(values.tolist())
        assert reader.offset == len(data)

    # Exactly one full chunk, then end of data
    data = b'\x01\x00' * MICH_CHUNK_RECORDS
    assert parse_mich_data(reader_for(data)) == (1,) * MICH_CHUNK_RECORDS

    print("✓ Mich data across chunks")


def test_empty_payloads():
    """Test that an exhausted stream yields empty collections"""
    assert parse_raw_data(reader_for(b''), "") == ()
    assert parse_listmode_data(reader_for(b''), "") == ()
    assert parse_mich_data(reader_for(b'')) == ()
    assert mich_to_array(()).shape == (0,)
    assert listmode_to_array(()).shape == (0,)


def run_all_tests():
    """Run all tests"""
    print("Running payload tests...\n")

    try:
        test_raw_data()
        test_raw_data_trailing_partial_record()
        test_listmode_data()
        test_listmode_trailing_partial_record()
        test_mich_data()
        test_mich_data_across_chunks()
        test_empty_payloads()

        print("\n✅ All tests passed!")
        return True

    except Exception as e:
        print(f"\n❌ Test failed: {e}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
