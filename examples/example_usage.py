#!/usr/bin/env python3
"""
Example usage of the petdata package.

Usage:
    python examples/example_usage.py scan.dat codes.yaml [profile]
"""

import sys
import numpy as np
from petdata import load_decoder_config, read_data_file, get_profile, listmode_to_array, mich_to_array, PayloadKind


def main(argv):
    if len(argv) < 3:
        print(__doc__)
        return 1

    config = load_decoder_config(argv[2])
    profile = get_profile(argv[3]) if len(argv) > 3 else None
    dataset = read_data_file(argv[1], config, profile)

    print(f"Device: {dataset.device_info.device} ({dataset.device_info.serial})")
    print(f"Kind: {dataset.kind.value}, sections: {', '.join(dataset.sections_present())}")

    if dataset.kind is PayloadKind.LISTMODE_DATA:
        events = listmode_to_array(dataset.listmode_data)
        good = events[~events['xtalk']]
        print(f"{len(events)} events, {len(good)} without cross-talk")
        if len(good):
            hist, edges = np.histogram(good['energy'], bins=16)
            peak = int(np.argmax(hist))
            print(f"Energy peak between {edges[peak]:.1f} and {edges[peak + 1]:.1f}")

    elif dataset.kind is PayloadKind.MICH_DATA:
        print(f"{len(dataset.mich_data)} bins, {int(mich_to_array(dataset.mich_data).sum(dtype=np.uint64))} counts")

    elif dataset.kind is PayloadKind.RAW_DATA:
        ips = sorted({item.ip for item in dataset.raw_data})
        print(f"{len(dataset.raw_data)} raw blocks from {len(ips)} interface positions")

    elif dataset.image_info is not None:
        print(f"Image shape (slices, rows, cols): {dataset.image_info.image_shape}")

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
