"""
Top-level decoding of PET/CT data files.

decode() reads PublicInfo and DeviceInfo, then dispatches on the PublicInfo
type discriminator to decide which remaining sections and which payload
follow:

    raw_data / listmode_data / mich_data     Acquisition, Data, payload
    energy/time calibration map, spectrum    Data
    anything else                            Acquisition, Image, Data
"""

import os
import warnings
from typing import BinaryIO, Optional

from .binary_format import FormatProfile, PayloadKind, DEFAULT_PROFILE
from .config import DecoderConfig
from .data_types import DataSet, PublicInfo, DeviceInfo
from .field_reader import FieldReader
from .payloads import parse_raw_data, parse_listmode_data, parse_mich_data
from .sections import (
    parse_public_info, parse_device_info, parse_acquisition_info,
    parse_image_info, parse_data_info
)

HEADER_ONLY_KINDS = frozenset({
    PayloadKind.ENERGY_CALIBRATION_MAP,
    PayloadKind.TIME_CALIBRATION_MAP,
    PayloadKind.ENERGY_SPECTRUM_DATA,
})


def dispatch_sections(reader: FieldReader, public_info: PublicInfo,
                      device_info: DeviceInfo, config: DecoderConfig) -> DataSet:
    """
    Decode the type-dependent sections and payload.

    Args:
        reader: Reader positioned just after DeviceInfo
        public_info: Already decoded PublicInfo (its type selects the branch)
        device_info: Already decoded DeviceInfo
        config: Type codes and IP prefix

    Returns:
        Fully populated DataSet
    """
    kind = config.type_codes.classify(public_info.type)

    acquisition_info = None
    image_info = None
    if kind not in HEADER_ONLY_KINDS:
        acquisition_info = parse_acquisition_info(reader)
    if kind is PayloadKind.IMAGE:
        image_info = parse_image_info(reader)
    data_info = parse_data_info(reader)
    payload_offset = reader.offset

    raw_data = None
    listmode_data = None
    mich_data = None
    if kind is PayloadKind.RAW_DATA:
        raw_data = parse_raw_data(reader, config.ip_prefix)
    elif kind is PayloadKind.LISTMODE_DATA:
        listmode_data = parse_listmode_data(reader, config.ip_prefix)
    elif kind is PayloadKind.MICH_DATA:
        mich_data = parse_mich_data(reader)

    return DataSet(
        kind=kind,
        public_info=public_info,
        device_info=device_info,
        data_info=data_info,
        payload_offset=payload_offset,
        acquisition_info=acquisition_info,
        image_info=image_info,
        raw_data=raw_data,
        listmode_data=listmode_data,
        mich_data=mich_data,
    )


def decode(stream: BinaryIO, profile: FormatProfile, config: DecoderConfig) -> DataSet:
    """
    Decode a complete data file from an open binary stream.

    The stream is read forward to its end and is not closed.

    Raises:
        ShortRead: If any header field or started record is truncated
    """
    reader = FieldReader(stream, profile)
    public_info = parse_public_info(reader)
    device_info = parse_device_info(reader)
    return dispatch_sections(reader, public_info, device_info, config)


def resolve_profile(config: DecoderConfig,
                    profile: Optional[FormatProfile] = None) -> FormatProfile:
    """Explicit profile, else the config's profile, else little-endian/raw"""
    if profile is not None:
        return profile
    if config.profile is not None:
        return config.profile
    return DEFAULT_PROFILE


def read_data_file(filename: str, config: DecoderConfig,
                   profile: Optional[FormatProfile] = None) -> DataSet:
    """
    Open, decode and close a data file.

    Args:
        filename: Path to the data file
        config: Type codes and IP prefix
        profile: Format profile (see resolve_profile for the fallback)
    """
    with open(filename, 'rb') as f:
        return decode(f, resolve_profile(config, profile), config)


def get_file_info(filename: str, config: DecoderConfig,
                  profile: Optional[FormatProfile] = None) -> dict:
    """
    Get summary information about a data file.

    Returns:
        Dictionary with file and section statistics
    """
    profile = resolve_profile(config, profile)
    file_size = os.path.getsize(filename)
    dataset = read_data_file(filename, config, profile)

    actual_data_length = file_size - dataset.payload_offset
    if dataset.data_info.data_length != actual_data_length:
        warnings.warn(f"{filename}: DataInfo declares {dataset.data_info.data_length} "
                      f"payload bytes, file holds {actual_data_length}")

    return {
        'filename': filename,
        'file_size': file_size,
        'profile': profile.name,
        'kind': dataset.kind,
        'type': dataset.public_info.type,
        'software_version': dataset.public_info.software_version,
        'device': dataset.device_info.device,
        'serial': dataset.device_info.serial,
        'sections': dataset.sections_present(),
        'payload_count': dataset.payload_count(),
        'payload_offset': dataset.payload_offset,
        'declared_data_length': dataset.data_info.data_length,
        'actual_data_length': actual_data_length,
    }
