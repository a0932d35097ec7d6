"""
Builders for synthetic PET/CT data files used by the tests.
"""

import struct

from petdata.binary_format import DataTypeCodes
from petdata.config import DecoderConfig

TEST_CODES = DataTypeCodes(
    raw_data=0x0101,
    listmode_data=0x0102,
    mich_data=0x0103,
    energy_calibration_map=0x0201,
    time_calibration_map=0x0202,
    energy_spectrum_data=0x0203,
)
TEST_PREFIX = "10.0."
TEST_CONFIG = DecoderConfig(TEST_CODES, TEST_PREFIX)
IMAGE_TYPE = 0x7777  # not one of TEST_CODES


def text(value: str, size: int) -> bytes:
    data = value.encode('latin-1')
    return data + b'\x00' * (size - len(data))


def pack(order: str, fmt: str, *values) -> bytes:
    return struct.pack(order + fmt, *values)


def public_info(order: str, type_value: int, version: str = "SW-2.1") -> bytes:
    return (text("PETDATAMAGIC", 16)
            + pack(order, 'HIH', 0xBEEF, 28, type_value)
            + text(version, 16)
            + pack(order, 'I', 1024))


def device_info(order: str, device: str = "PETCT-X", serial: str = "SN0042") -> bytes:
    return (pack(order, 'I', 96)
            + text(device, 16) + text(serial, 16)
            + pack(order, '8H', 4, 48, 96, 64, 12, 1, 144, 0)
            + pack(order, '8f', *[float(i) for i in range(8)])
            + pack(order, '3f', 0.5, 1.5, 2.5))


def acquisition_info(order: str, patient: str = "DOE^JOHN") -> bytes:
    return (pack(order, 'IHf', 360, 18, 370.5)
            + text("20260101120000", 16) + text("20260101130000", 16)
            + pack(order, 'Hfff', 600, 4.5, 100.0, 2.0)
            + pack(order, '2I', 350, 650)
            + pack(order, 'HH', 3, 1)
            + pack(order, 'fff', 12.5, 80.0, 700.0)
            + pack(order, 'HH', 2, 1)
            + pack(order, 'f', 200.0)
            + text("P-001", 64) + text("S-001", 64)
            + text(patient, 128) + text("M", 8)
            + pack(order, 'ff', 175.0, 70.0))


def image_info(order: str) -> bytes:
    return (pack(order, 'IHHH', 122, 192, 192, 96)
            + pack(order, 'fff', 2.0, 2.0, 2.5)
            + text("OSEM", 16)
            + pack(order, '5H', 79, 12, 3, 1, 1)
            + pack(order, '6f', 1, 2, 3, 4, 5, 6)
            + pack(order, '2f', 0.1, 0.2)
            + pack(order, '3f', -1.0, 0.0, 1.0)
            + pack(order, 'fH', 90.0, 7)
            + text("RECON-3.0", 16)
            + pack(order, 'II', 123456, 7890))


def data_info(order: str, data_length: int = 0) -> bytes:
    return pack(order, 'IIH', 10, data_length, 0xCAFE)


def header(order: str, type_value: int, data_length: int = 0) -> bytes:
    """Header sections for a type value classified with TEST_CODES"""
    kind_sections = public_info(order, type_value) + device_info(order)
    if type_value not in (TEST_CODES.energy_calibration_map,
                          TEST_CODES.time_calibration_map,
                          TEST_CODES.energy_spectrum_data):
        kind_sections += acquisition_info(order)
    if type_value not in TEST_CODES:
        kind_sections += image_info(order)
    return kind_sections + data_info(order, data_length)


def raw_record(order: str, fill: int, ip: int) -> bytes:
    return bytes([fill]) * 1152 + pack(order, 'H', ip)


def listmode_record(order: str, ip: int, word: int, energy: float, time: float) -> bytes:
    return pack(order, 'HHfd', ip, word, energy, time)
