"""
Command-line interface for the PET/CT data reader.

Provides utilities to inspect decoded data files.
"""

import argparse
import sys
import numpy as np
from .binary_format import PROFILES, get_profile, kind_name
from .config import ConfigError, load_decoder_config
from .data_types import DataSet, listmode_to_array, mich_to_array
from .field_reader import DecodeError
from .reader import get_file_info, read_data_file


def _load(config_file: str, profile_name: str = None):
    config = load_decoder_config(config_file)
    profile = get_profile(profile_name) if profile_name else None
    return config, profile


def info_command(filename: str, config_file: str, profile_name: str = None):
    """Print summary information about a data file"""
    print(f"Analyzing data file: {filename}")
    print("=" * 50)

    try:
        config, profile = _load(config_file, profile_name)
        info = get_file_info(filename, config, profile)
    except (ConfigError, ValueError, DecodeError, OSError) as e:
        print(f"Error: {e}")
        return 1

    print(f"File size: {info['file_size']:,} bytes")
    print(f"Profile: {info['profile']}")
    print(f"Type: {info['type']} ({kind_name(info['kind'])})")
    print(f"Software version: {info['software_version']!r}")
    print(f"Device: {info['device']!r}  Serial: {info['serial']!r}")
    print(f"Sections: {', '.join(info['sections'])}")
    print(f"Payload records: {info['payload_count']}")
    print(f"Payload bytes: {info['actual_data_length']} "
          f"(declared {info['declared_data_length']})")
    return 0


def _print_sections(dataset: DataSet):
    sections = [
        ('PublicInfo', dataset.public_info),
        ('DeviceInfo', dataset.device_info),
        ('AcquisitionInfo', dataset.acquisition_info),
        ('ImageInfo', dataset.image_info),
        ('DataInfo', dataset.data_info),
    ]
    for title, section in sections:
        if section is None:
            continue
        print(f"\n{title}:")
        for name, value in section._asdict().items():
            print(f"  {name}: {value!r}")


def _print_payload(dataset: DataSet, max_records: int):
    if dataset.raw_data is not None:
        print(f"\nRawData: {len(dataset.raw_data)} blocks")
        for i, item in enumerate(dataset.raw_data[:max_records]):
            block = item.as_array()
            print(f"  [{i}] ip={item.ip} sum={int(block.sum())} max={int(block.max())}")

    elif dataset.listmode_data is not None:
        print(f"\nListmodeData: {len(dataset.listmode_data)} events")
        for i, item in enumerate(dataset.listmode_data[:max_records]):
            print(f"  [{i}] ip={item.ip} channel={item.channel} xtalk={item.xtalk} "
                  f"reserved={item.reserved} energy={item.energy:.3f} time={item.time:.6f}")
        if dataset.listmode_data:
            events = listmode_to_array(dataset.listmode_data)
            print(f"  Energy range: {events['energy'].min():.3f} to {events['energy'].max():.3f}")
            print(f"  Cross-talk events: {int(np.sum(events['xtalk']))}")

    elif dataset.mich_data is not None:
        print(f"\nMichData: {len(dataset.mich_data)} bins")
        if len(dataset.mich_data):
            bins = mich_to_array(dataset.mich_data)
            print(f"  Total counts: {int(bins.sum(dtype=np.uint64))}")
            print(f"  First bins: {list(dataset.mich_data[:max_records])}")


def dump_command(filename: str, config_file: str, profile_name: str = None,
                 max_records: int = 10):
    """Dump data file contents in human-readable format"""
    print(f"Dumping data file: {filename}")
    print("=" * 50)

    try:
        config, profile = _load(config_file, profile_name)
        dataset = read_data_file(filename, config, profile)
    except (ConfigError, ValueError, DecodeError, OSError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Type: {dataset.public_info.type} ({kind_name(dataset.kind)})")
    _print_sections(dataset)
    _print_payload(dataset, max_records)
    return 0


def profiles_command():
    """List the available format profiles"""
    for name, profile in sorted(PROFILES.items()):
        print(f"{name}: byte order {profile.byte_order.name.lower()}, "
              f"strings {profile.string_policy.value}")
    return 0


def main(argv=None):
    """Main command-line interface"""
    parser = argparse.ArgumentParser(
        description="petdata - PET/CT scanner data file reader",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  petdata info scan.dat --config codes.yaml                 # Show file summary
  petdata dump scan.dat --config codes.yaml --max-records 5 # Dump sections and 5 records
  petdata dump scan.dat --config codes.yaml --profile big-trimmed
  petdata profiles                                          # List format profiles
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    info_parser = subparsers.add_parser('info', help='Show data file information')
    info_parser.add_argument('filename', help='Data file to analyze')
    info_parser.add_argument('--config', required=True,
                             help='Decoder configuration (YAML)')
    info_parser.add_argument('--profile', choices=sorted(PROFILES),
                             help='Format profile (default: from config, else little-raw)')

    dump_parser = subparsers.add_parser('dump', help='Dump data file contents')
    dump_parser.add_argument('filename', help='Data file to dump')
    dump_parser.add_argument('--config', required=True,
                             help='Decoder configuration (YAML)')
    dump_parser.add_argument('--profile', choices=sorted(PROFILES),
                             help='Format profile (default: from config, else little-raw)')
    dump_parser.add_argument('--max-records', type=int, default=10,
                             help='Maximum payload records to print (default: 10)')

    subparsers.add_parser('profiles', help='List format profiles')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == 'info':
        return info_command(args.filename, args.config, args.profile)

    elif args.command == 'dump':
        if args.max_records < 0:
            dump_parser.error(f"--max-records must be 0 or more, got {args.max_records}")
        return dump_command(args.filename, args.config, args.profile, args.max_records)

    elif args.command == 'profiles':
        return profiles_command()

    else:
        print(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
