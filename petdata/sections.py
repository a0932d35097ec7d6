"""
Fixed-order section decoders.

Each decoder consumes its fields positionally with strict reads; a short
stream raises ShortRead and aborts the decode. CRC and length fields are
returned as plain values and never checked.
"""

from .binary_format import (
    MAGIC_SIZE, VERSION_TEXT_SIZE, DEVICE_TEXT_SIZE, TIMESTAMP_TEXT_SIZE,
    PATIENT_ID_SIZE, STUDY_ID_SIZE, PATIENT_NAME_SIZE, PATIENT_SEX_SIZE,
    RECON_TEXT_SIZE, MVT_THRESHOLD_COUNT, MVT_PARAMETER_COUNT,
    SCATTER_PARAMETER_COUNT, TV_PARAMETER_COUNT, FOV_OFFSET_COUNT
)
from .data_types import PublicInfo, DeviceInfo, AcquisitionInfo, ImageInfo, DataInfo
from .field_reader import FieldReader


def parse_public_info(reader: FieldReader) -> PublicInfo:
    """
    Parse the magic prefix and PublicInfo section.

    Format: magic(16) + crc(u16) + length(u32) + type(u16)
            + software_version(16) + header_length(u32)
    """
    reader.read_bytes(MAGIC_SIZE, 'magic')
    return PublicInfo(
        header_crc=reader.read_u16('header_crc'),
        length=reader.read_u32('public_info.length'),
        type=reader.read_u16('type'),
        software_version=reader.read_text(VERSION_TEXT_SIZE, 'software_version'),
        header_length=reader.read_u32('header_length'),
    )


def parse_device_info(reader: FieldReader) -> DeviceInfo:
    return DeviceInfo(
        length=reader.read_u32('device_info.length'),
        device=reader.read_text(DEVICE_TEXT_SIZE, 'device'),
        serial=reader.read_text(DEVICE_TEXT_SIZE, 'serial'),
        axis_detectors=reader.read_u16('axis_detectors'),
        trans_detectors=reader.read_u16('trans_detectors'),
        detector_rings=reader.read_u16('detector_rings'),
        detector_channels=reader.read_u16('detector_channels'),
        ip_counts=reader.read_u16('ip_counts'),
        ip_start=reader.read_u16('ip_start'),
        channel_counts=reader.read_u16('channel_counts'),
        channel_start=reader.read_u16('channel_start'),
        mvt_thresholds=reader.read_f32_array(MVT_THRESHOLD_COUNT, 'mvt_thresholds'),
        mvt_parameters=reader.read_f32_array(MVT_PARAMETER_COUNT, 'mvt_parameters'),
    )


def parse_acquisition_info(reader: FieldReader) -> AcquisitionInfo:
    return AcquisitionInfo(
        length=reader.read_u32('acquisition_info.length'),
        isotope=reader.read_u16('isotope'),
        activity=reader.read_f32('activity'),
        inject_time=reader.read_text(TIMESTAMP_TEXT_SIZE, 'inject_time'),
        time=reader.read_text(TIMESTAMP_TEXT_SIZE, 'time'),
        duration=reader.read_u16('duration'),
        time_window=reader.read_f32('time_window'),
        delay_window=reader.read_f32('delay_window'),
        xtalk_window=reader.read_f32('xtalk_window'),
        energy_window=(reader.read_u32('energy_window.low'),
                       reader.read_u32('energy_window.high')),
        position_window=reader.read_u16('position_window'),
        corrected=reader.read_u16('corrected'),
        table_position=reader.read_f32('table_position'),
        table_height=reader.read_f32('table_height'),
        pet_ct_spacing=reader.read_f32('pet_ct_spacing'),
        table_count=reader.read_u16('table_count'),
        table_index=reader.read_u16('table_index'),
        scan_length_per_table=reader.read_f32('scan_length_per_table'),
        patient_id=reader.read_text(PATIENT_ID_SIZE, 'patient_id'),
        study_id=reader.read_text(STUDY_ID_SIZE, 'study_id'),
        patient_name=reader.read_text(PATIENT_NAME_SIZE, 'patient_name'),
        patient_sex=reader.read_text(PATIENT_SEX_SIZE, 'patient_sex'),
        patient_height=reader.read_f32('patient_height'),
        patient_weight=reader.read_f32('patient_weight'),
    )


def parse_image_info(reader: FieldReader) -> ImageInfo:
    """Parse ImageInfo (only present for the default/image type)"""
    return ImageInfo(
        length=reader.read_u32('image_info.length'),
        image_size_rows=reader.read_u16('image_size_rows'),
        image_size_cols=reader.read_u16('image_size_cols'),
        image_size_slices=reader.read_u16('image_size_slices'),
        image_row_pixel_size=reader.read_f32('image_row_pixel_size'),
        image_column_pixel_size=reader.read_f32('image_column_pixel_size'),
        image_slice_thickness=reader.read_f32('image_slice_thickness'),
        recon_method=reader.read_text(RECON_TEXT_SIZE, 'recon_method'),
        max_ring_diff_num=reader.read_u16('max_ring_diff_num'),
        subset_num=reader.read_u16('subset_num'),
        iter_num=reader.read_u16('iter_num'),
        attn_calibration=reader.read_u16('attn_calibration'),
        scat_calibration=reader.read_u16('scat_calibration'),
        scat_para=reader.read_f32_array(SCATTER_PARAMETER_COUNT, 'scat_para'),
        tv_para=reader.read_f32_array(TV_PARAMETER_COUNT, 'tv_para'),
        pet_ct_fov_offset=reader.read_f32_array(FOV_OFFSET_COUNT, 'pet_ct_fov_offset'),
        ct_rotation_angle=reader.read_f32('ct_rotation_angle'),
        series_number=reader.read_u16('series_number'),
        recon_software_version=reader.read_text(RECON_TEXT_SIZE, 'recon_software_version'),
        prompts_counts=reader.read_u32('prompts_counts'),
        delay_counts=reader.read_u32('delay_counts'),
    )


def parse_data_info(reader: FieldReader) -> DataInfo:
    return DataInfo(
        length=reader.read_u32('data_info.length'),
        data_length=reader.read_u32('data_length'),
        crc=reader.read_u16('data_crc'),
    )
