"""
Payload decoders.

The payload carries no record count: records are decoded until the stream
is exhausted. Each iteration probes for one whole record; when fewer bytes
than a full record remain the loop stops and any remainder is dropped.
"""

import numpy as np
from typing import Tuple

from .binary_format import (
    RAW_BLOCK_SIZE, RAW_RECORD_SIZE, LISTMODE_RECORD_SIZE, MICH_RECORD_SIZE,
    ip_to_str, unpack_channel_word
)
from .data_types import RawDataItem, ListmodeDataItem
from .field_reader import FieldReader

MICH_CHUNK_RECORDS = 32768


def parse_raw_data(reader: FieldReader, ip_prefix: str) -> Tuple[RawDataItem, ...]:
    """
    Parse raw detector blocks.

    Record format: block(1152) + ip(u16)
    """
    items = []
    while True:
        record = reader.probe_record(RAW_RECORD_SIZE)
        if record is None:
            break
        data = record.read_bytes(RAW_BLOCK_SIZE, 'raw.data')
        ip = record.read_u16('raw.ip')
        items.append(RawDataItem(data=data, ip=ip_to_str(ip, ip_prefix)))
    return tuple(items)


def parse_listmode_data(reader: FieldReader, ip_prefix: str) -> Tuple[ListmodeDataItem, ...]:
    """
    Parse list-mode events.

    Record format: ip(u16) + channel word(u16) + energy(f32) + time(f64)
    """
    items = []
    while True:
        record = reader.probe_record(LISTMODE_RECORD_SIZE)
        if record is None:
            break
        ip = record.read_u16('listmode.ip')
        word = unpack_channel_word(record.read_u16('listmode.channel'))
        items.append(ListmodeDataItem(
            ip=ip_to_str(ip, ip_prefix),
            xtalk=word.xtalk,
            reserved=word.reserved,
            channel=word.channel,
            energy=record.read_f32('listmode.energy'),
            time=record.read_f64('listmode.time'),
        ))
    return tuple(items)


def parse_mich_data(reader: FieldReader) -> Tuple[int, ...]:
    """
    Parse Michelogram bins.

    Bins are read in whole-record chunks and decoded with numpy; an odd
    trailing byte is dropped.
    """
    dtype = np.dtype(reader.profile.byte_order.value + 'u2')
    chunk_size = MICH_RECORD_SIZE * MICH_CHUNK_RECORDS
    arrays = []
    while True:
        chunk = reader.read_available(chunk_size)
        usable = len(chunk) - len(chunk) % MICH_RECORD_SIZE
        if usable:
            arrays.append(np.frombuffer(chunk[:usable], dtype=dtype))
        if len(chunk) < chunk_size:
            break
    if not arrays:
        return ()
    return tuple(np.concatenate(arrays).tolist())
