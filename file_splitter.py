#!/usr/bin/env python3
"""
Byte-Range File Splitter

Divides one large file into a fixed number of contiguous byte-range files on disk.
Data is moved through a small fixed-size buffer so memory use stays bounded no
matter how large the source or the individual splits are.
"""

import os
import sys
import argparse
from collections import namedtuple
from pathlib import Path
from tqdm import tqdm

DEFAULT_NUM_SPLITS = 10
DEFAULT_BUFFER_SIZE = 8 * 1024  # 8KB

SplitDescriptor = namedtuple("SplitDescriptor", ["index", "offset", "length", "path"], defaults=(None,))


def split_file_name(index):
    """Name of the split file holding the given (1-based) split index."""
    return f"split.{index}.txt"


def plan_splits(source_size, num_splits=DEFAULT_NUM_SPLITS):
    """
    Calculate the byte ranges for each split.

    The first num_splits ranges all hold source_size // num_splits bytes. If the
    size does not divide evenly, one more range carries the trailing remainder,
    so the caller may get num_splits + 1 descriptors back.
    """
    if num_splits < 1:
        raise ValueError(f"num_splits must be at least 1, got {num_splits}")
    if source_size < 0:
        raise ValueError(f"source_size must not be negative, got {source_size}")

    bytes_per_split = source_size // num_splits
    remaining_bytes = source_size % num_splits

    splits = []
    for i in range(num_splits):
        splits.append(SplitDescriptor(i + 1, i * bytes_per_split, bytes_per_split))

    if remaining_bytes > 0:
        splits.append(SplitDescriptor(num_splits + 1, num_splits * bytes_per_split, remaining_bytes))

    return splits


def copy_range(src, dst, num_bytes, buffer_size=DEFAULT_BUFFER_SIZE, progress=None):
    """Copy exactly num_bytes from the current position of src into dst, buffer_size at a time."""
    remaining = num_bytes
    while remaining > 0:
        data = src.read(min(buffer_size, remaining))
        if not data:
            raise IOError(f"Unexpected end of file: {remaining:,} bytes short")
        dst.write(data)
        remaining -= len(data)
        if progress is not None:
            progress.update(len(data))
    return num_bytes


def split_file(input_file, output_dir, num_splits=DEFAULT_NUM_SPLITS,
               buffer_size=DEFAULT_BUFFER_SIZE, show_progress=True):
    """
    Split input_file into byte-range files inside output_dir.

    Returns the list of SplitDescriptor, each with its path filled in. Any OSError
    (unreadable source, failed write) is left to propagate: a partial split is of
    no use to the caller.
    """
    if buffer_size < 1:
        raise ValueError(f"buffer_size must be at least 1, got {buffer_size}")

    output_dir = Path(output_dir)
    output_dir.mkdir(exist_ok=True, parents=True)

    # The source is only ever opened for reading
    with open(input_file, "rb") as src:
        source_size = os.fstat(src.fileno()).st_size
        splits = plan_splits(source_size, num_splits)

        print(f"Splitting {input_file} ({source_size:,} bytes) into {len(splits)} files in {output_dir}")

        written = []
        with tqdm(total=source_size, unit='B', unit_scale=True, desc="Splitting",
                  disable=not show_progress) as pbar:
            for split in splits:
                split_path = output_dir / split_file_name(split.index)
                with open(split_path, "wb") as dst:
                    copy_range(src, dst, split.length, buffer_size, pbar)
                written.append(split._replace(path=split_path))

    return written


def main(argv=None):
    parser = argparse.ArgumentParser(description="Split a file into contiguous byte-range files")
    parser.add_argument("input_file", help="Path to the file to split")
    parser.add_argument("output_dir", help="Directory to write split.<index>.txt files into")
    parser.add_argument("--splits", type=int, default=DEFAULT_NUM_SPLITS,
                        help=f"Number of equal-sized splits (default: {DEFAULT_NUM_SPLITS})")
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                        help=f"Transfer buffer size in bytes (default: {DEFAULT_BUFFER_SIZE})")
    args = parser.parse_args(argv)

    if not os.path.exists(args.input_file):
        print(f"Error: Input file {args.input_file} does not exist")
        sys.exit(1)

    try:
        splits = split_file(args.input_file, args.output_dir, args.splits, args.buffer_size)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    for split in splits:
        print(f"{split.path}: offset {split.offset:,}, {split.length:,} bytes")


if __name__ == "__main__":
    main()
