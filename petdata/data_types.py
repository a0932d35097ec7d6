"""
Decoded section and payload types for PET/CT data files.

All types are immutable NamedTuples; a DataSet is built once per decode.
"""

import numpy as np
from typing import NamedTuple, Optional, List, Sequence, Tuple, TYPE_CHECKING
from .binary_format import PayloadKind, RAW_BLOCK_SIZE

if TYPE_CHECKING:
    from numpy.typing import NDArray


class PublicInfo(NamedTuple):
    """File identification header (preceded by a 16-byte magic)"""
    header_crc: int          # uint16, not verified
    length: int              # uint32
    type: int                # uint16 discriminator
    software_version: str    # 16 bytes
    header_length: int       # uint32


class DeviceInfo(NamedTuple):
    """Scanner configuration"""
    length: int
    device: str
    serial: str
    axis_detectors: int
    trans_detectors: int
    detector_rings: int
    detector_channels: int
    ip_counts: int
    ip_start: int
    channel_counts: int
    channel_start: int
    mvt_thresholds: Tuple[float, ...]   # 8 values
    mvt_parameters: Tuple[float, ...]   # 3 values


class AcquisitionInfo(NamedTuple):
    """Acquisition parameters and patient information"""
    length: int
    isotope: int
    activity: float
    inject_time: str
    time: str
    duration: int
    time_window: float
    delay_window: float
    xtalk_window: float
    energy_window: Tuple[int, int]  # (low, high)
    position_window: int
    corrected: int
    table_position: float
    table_height: float
    pet_ct_spacing: float
    table_count: int
    table_index: int
    scan_length_per_table: float
    patient_id: str
    study_id: str
    patient_name: str
    patient_sex: str
    patient_height: float
    patient_weight: float


class ImageInfo(NamedTuple):
    """Reconstructed image parameters"""
    length: int
    image_size_rows: int
    image_size_cols: int
    image_size_slices: int
    image_row_pixel_size: float
    image_column_pixel_size: float
    image_slice_thickness: float
    recon_method: str
    max_ring_diff_num: int
    subset_num: int
    iter_num: int
    attn_calibration: int
    scat_calibration: int
    scat_para: Tuple[float, ...]            # 6 values
    tv_para: Tuple[float, ...]              # 2 values
    pet_ct_fov_offset: Tuple[float, ...]    # 3 values
    ct_rotation_angle: float
    series_number: int
    recon_software_version: str
    prompts_counts: int
    delay_counts: int

    @property
    def image_shape(self) -> tuple[int, int, int]:
        """(slices, rows, cols)"""
        return (self.image_size_slices, self.image_size_rows, self.image_size_cols)


class DataInfo(NamedTuple):
    """Payload descriptor"""
    length: int
    data_length: int
    crc: int                 # uint16, not verified


class RawDataItem(NamedTuple):
    """One raw detector block and the interface position it came from"""
    data: bytes              # 1152 bytes
    ip: str

    def as_array(self) -> 'NDArray':
        """Block as a uint8 array (read-only view)"""
        return np.frombuffer(self.data, dtype=np.uint8)


class ListmodeDataItem(NamedTuple):
    """One list-mode event"""
    ip: str
    xtalk: bool
    reserved: int            # 3 bits
    channel: int             # 12 bits
    energy: float
    time: float


class DataSet(NamedTuple):
    """Complete decoded file"""
    kind: PayloadKind
    public_info: PublicInfo
    device_info: DeviceInfo
    data_info: DataInfo
    payload_offset: int                                  # first byte after DataInfo
    acquisition_info: Optional[AcquisitionInfo] = None
    image_info: Optional[ImageInfo] = None
    raw_data: Optional[Tuple[RawDataItem, ...]] = None
    listmode_data: Optional[Tuple[ListmodeDataItem, ...]] = None
    mich_data: Optional[Tuple[int, ...]] = None          # uint16 bins

    def payload_count(self) -> int:
        """Number of payload records decoded (0 for header-only kinds)"""
        if self.raw_data is not None:
            return len(self.raw_data)
        if self.listmode_data is not None:
            return len(self.listmode_data)
        if self.mich_data is not None:
            return len(self.mich_data)
        return 0

    def sections_present(self) -> List[str]:
        """Names of the sections decoded, in file order"""
        names = ['public_info', 'device_info']
        if self.acquisition_info is not None:
            names.append('acquisition_info')
        if self.image_info is not None:
            names.append('image_info')
        names.append('data_info')
        return names


LISTMODE_DTYPE = np.dtype([
    ('ip', 'O'),
    ('xtalk', '?'),
    ('reserved', 'u1'),
    ('channel', 'u2'),
    ('energy', 'f4'),
    ('time', 'f8'),
])


def listmode_to_array(items: Sequence[ListmodeDataItem]) -> 'NDArray':
    """Convert list-mode events to a numpy structured array"""
    return np.array([tuple(item) for item in items], dtype=LISTMODE_DTYPE)


def raw_blocks(items: Sequence[RawDataItem]) -> 'NDArray':
    """Stack raw detector blocks into an (n, 1152) uint8 array"""
    if not items:
        return np.empty((0, RAW_BLOCK_SIZE), dtype=np.uint8)
    return np.stack([item.as_array() for item in items])


def mich_to_array(bins: Sequence[int]) -> 'NDArray':
    """Convert Michelogram bins to a 1-D uint16 array"""
    return np.array(bins, dtype=np.uint16)
