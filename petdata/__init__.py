"""
PET/CT Data Reader Package

A lightweight Python library for decoding the fixed-layout binary data
files written by the PET/CT scanner acquisition software. Provides:
- Sequential field decoding under a byte-order/string-trim profile
- Header section decoding (public, device, acquisition, image, data info)
- Raw detector, list-mode and Michelogram payload decoding

License: MIT
"""

__version__ = "0.1.0"

from .binary_format import (
    ByteOrder, StringPolicy, FormatProfile, PayloadKind, DataTypeCodes,
    LITTLE_RAW, BIG_TRIMMED, PROFILES, get_profile, ip_to_str, unpack_channel_word
)
from .field_reader import DecodeError, ShortRead, FieldReader
from .data_types import (
    PublicInfo, DeviceInfo, AcquisitionInfo, ImageInfo, DataInfo,
    RawDataItem, ListmodeDataItem, DataSet, listmode_to_array, mich_to_array, raw_blocks
)
from .config import ConfigError, DecoderConfig, load_decoder_config
from .reader import decode, dispatch_sections, read_data_file, get_file_info

__all__ = [
    'ByteOrder',
    'StringPolicy',
    'FormatProfile',
    'PayloadKind',
    'DataTypeCodes',
    'LITTLE_RAW',
    'BIG_TRIMMED',
    'PROFILES',
    'get_profile',
    'ip_to_str',
    'unpack_channel_word',
    'DecodeError',
    'ShortRead',
    'FieldReader',
    'PublicInfo',
    'DeviceInfo',
    'AcquisitionInfo',
    'ImageInfo',
    'DataInfo',
    'RawDataItem',
    'ListmodeDataItem',
    'DataSet',
    'listmode_to_array',
    'mich_to_array',
    'raw_blocks',
    'ConfigError',
    'DecoderConfig',
    'load_decoder_config',
    'decode',
    'dispatch_sections',
    'read_data_file',
    'get_file_info',
]
