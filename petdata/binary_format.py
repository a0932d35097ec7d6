"""
Binary format definitions for PET/CT scanner data files.

File layout (all sections fixed-order, positional, no tags):
- Magic(16) + PublicInfo(28)        = 44 bytes, always present
- DeviceInfo                        = 96 bytes, always present
- AcquisitionInfo                   = 360 bytes, present for most types
- ImageInfo                         = 122 bytes, default type only
- DataInfo                          = 10 bytes, always present
- Payload records until end of file (no record count stored)

Two file variants exist which differ only in byte order and in how
fixed-length text fields are trimmed. Both are described by a FormatProfile.
"""

from enum import Enum
from typing import NamedTuple, Optional


class ByteOrder(Enum):
    """Byte order of every multi-byte field, as a struct prefix"""
    LITTLE = '<'
    BIG = '>'


class StringPolicy(Enum):
    """How fixed-length text fields are returned"""
    RAW = 'raw'          # keep trailing zero bytes
    TRIMMED = 'trimmed'  # strip trailing zero bytes


class FormatProfile(NamedTuple):
    """Byte order + string policy bound to a FieldReader at construction"""
    byte_order: ByteOrder
    string_policy: StringPolicy

    @property
    def name(self) -> str:
        return f"{self.byte_order.name.lower()}-{self.string_policy.value}"


LITTLE_RAW = FormatProfile(ByteOrder.LITTLE, StringPolicy.RAW)
BIG_TRIMMED = FormatProfile(ByteOrder.BIG, StringPolicy.TRIMMED)

PROFILES = {
    LITTLE_RAW.name: LITTLE_RAW,
    BIG_TRIMMED.name: BIG_TRIMMED,
}

DEFAULT_PROFILE = LITTLE_RAW


def get_profile(name: str) -> FormatProfile:
    """Look up a named format profile"""
    try:
        return PROFILES[name]
    except KeyError:
        known = ', '.join(sorted(PROFILES))
        raise ValueError(f"Unknown format profile '{name}' (known: {known})") from None


class PayloadKind(Enum):
    """Dispatch category selected by the PublicInfo type discriminator"""
    RAW_DATA = 'raw_data'
    LISTMODE_DATA = 'listmode_data'
    MICH_DATA = 'mich_data'
    ENERGY_CALIBRATION_MAP = 'energy_calibration_map'
    TIME_CALIBRATION_MAP = 'time_calibration_map'
    ENERGY_SPECTRUM_DATA = 'energy_spectrum_data'
    IMAGE = 'image'      # any unrecognized discriminator


class DataTypeCodes(NamedTuple):
    """
    Numeric discriminator values for each named data type.

    The values are defined by the scanner software, not by this package,
    so they are always supplied by the caller (see config.py).
    """
    raw_data: int
    listmode_data: int
    mich_data: int
    energy_calibration_map: int
    time_calibration_map: int
    energy_spectrum_data: int

    def validate(self) -> 'DataTypeCodes':
        for name, value in self._asdict().items():
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Type code '{name}' must be an integer, got {value!r}")
            if not 0 <= value <= 0xFFFF:
                raise ValueError(f"Type code '{name}' out of 16-bit range: {value}")
        if len(set(self)) != len(self):
            raise ValueError(f"Type codes must be distinct: {self._asdict()}")
        return self

    def classify(self, value: int) -> PayloadKind:
        """Map a discriminator value to its dispatch category"""
        for name, code in self._asdict().items():
            if value == code:
                return PayloadKind(name)
        return PayloadKind.IMAGE

    def code_for(self, kind: PayloadKind) -> Optional[int]:
        """Discriminator value of a named category (None for IMAGE)"""
        return self._asdict().get(kind.value)


# Fixed field sizes

MAGIC_SIZE = 16
VERSION_TEXT_SIZE = 16
DEVICE_TEXT_SIZE = 16
TIMESTAMP_TEXT_SIZE = 16
PATIENT_ID_SIZE = 64
STUDY_ID_SIZE = 64
PATIENT_NAME_SIZE = 128
PATIENT_SEX_SIZE = 8
RECON_TEXT_SIZE = 16

MVT_THRESHOLD_COUNT = 8
MVT_PARAMETER_COUNT = 3
SCATTER_PARAMETER_COUNT = 6
TV_PARAMETER_COUNT = 2
FOV_OFFSET_COUNT = 3

# Section sizes in bytes
PUBLIC_INFO_SIZE = MAGIC_SIZE + 28
DEVICE_INFO_SIZE = 96
ACQUISITION_INFO_SIZE = 360
IMAGE_INFO_SIZE = 122
DATA_INFO_SIZE = 10

# Payload record sizes in bytes
RAW_BLOCK_SIZE = 1152
RAW_RECORD_SIZE = RAW_BLOCK_SIZE + 2        # block + IP
LISTMODE_RECORD_SIZE = 2 + 2 + 4 + 8        # IP + channel word + energy + time
MICH_RECORD_SIZE = 2

# Listmode channel word layout
XTALK_BIT = 15
RESERVED_SHIFT = 12
RESERVED_MASK = 0x7
CHANNEL_MASK = 0xFFF

TEXT_ENCODING = 'latin-1'  # one character per byte


class ChannelWord(NamedTuple):
    """Unpacked 16-bit listmode channel word"""
    xtalk: bool
    reserved: int
    channel: int


def unpack_channel_word(word: int) -> ChannelWord:
    """
    Split a listmode channel word.

    Bit 15: cross-talk flag, bits 14-12: reserved, bits 11-0: channel.
    """
    return ChannelWord(
        xtalk=bool(word & (1 << XTALK_BIT)),
        reserved=(word >> RESERVED_SHIFT) & RESERVED_MASK,
        channel=word & CHANNEL_MASK,
    )


def ip_to_str(ip: int, prefix: str) -> str:
    """Render a 16-bit interface position as '<prefix><high>.<low>'"""
    return f"{prefix}{(ip >> 8) & 0xFF}.{ip & 0xFF}"


def trim_text(data: bytes) -> bytes:
    """Drop trailing zero bytes (an all-zero field becomes empty)"""
    end = len(data)
    while end > 0 and data[end - 1] == 0:
        end -= 1
    return data[:end]


def header_size(kind: PayloadKind) -> int:
    """Total header size in bytes for a dispatch category"""
    size = PUBLIC_INFO_SIZE + DEVICE_INFO_SIZE + DATA_INFO_SIZE
    if kind not in (PayloadKind.ENERGY_CALIBRATION_MAP,
                    PayloadKind.TIME_CALIBRATION_MAP,
                    PayloadKind.ENERGY_SPECTRUM_DATA):
        size += ACQUISITION_INFO_SIZE
    if kind is PayloadKind.IMAGE:
        size += IMAGE_INFO_SIZE
    return size


def kind_name(kind: PayloadKind) -> str:
    """Get human-readable name for a dispatch category"""
    return kind.value.replace('_', ' ')
