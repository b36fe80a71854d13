#!/usr/bin/env python3
"""
Top Phrases

Finds the most frequent |-separated phrases in a text file too large to read in
one go. The file is first split into byte-range files on disk, each split is then
streamed into one shared phrase count, and the top phrases are appended to the
output file.
"""

import os
import sys
import time
import argparse
from pathlib import Path
from tqdm import tqdm

from file_splitter import DEFAULT_NUM_SPLITS, DEFAULT_BUFFER_SIZE, split_file
from phrase_counter import (
    DEFAULT_DELIMITER, DEFAULT_ENCODING, DEFAULT_LIMIT,
    PhraseCounter, write_results,
)

DEFAULT_TMP_DIR = "top_phrases_tmp"


def count_splits(split_paths, counter, show_progress=True):
    """Feed every split file into counter. Unreadable splits are skipped."""
    for split_path in tqdm(split_paths, unit="splits", desc="Counting", disable=not show_progress):
        counter.add_file(split_path)

    read_count = len(split_paths) - len(counter.skipped_files)
    print(f"Counted {counter.total_phrases:,} phrases, {len(counter):,} unique "
          f"({read_count} of {len(split_paths)} splits read)")
    return counter


def remove_splits(splits, tmp_dir):
    """Delete the split files written by this run, then tmp_dir if nothing else is left in it."""
    for split in splits:
        Path(split.path).unlink(missing_ok=True)

    tmp_dir = Path(tmp_dir)
    if not any(tmp_dir.iterdir()):
        tmp_dir.rmdir()
    else:
        print(f"Leaving {tmp_dir} in place: it holds files this run did not write")


def run(input_file, output_file=None, tmp_dir=DEFAULT_TMP_DIR, num_splits=DEFAULT_NUM_SPLITS,
        limit=DEFAULT_LIMIT, buffer_size=DEFAULT_BUFFER_SIZE, delimiter=DEFAULT_DELIMITER,
        encoding=DEFAULT_ENCODING, append=True, cleanup=False, show_progress=True):
    """
    Split input_file, count its phrases and write the top `limit` of them.

    With no output_file the result is appended to input_file itself, once all the
    splits have been read. Returns the list of (phrase, count) pairs written.
    Errors while splitting or writing the result propagate; a split that cannot be
    read back only loses that split's phrases.
    """
    if output_file is None:
        output_file = input_file

    # Validate before any split files are written
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    counter = PhraseCounter(delimiter, encoding)

    splits = split_file(input_file, tmp_dir, num_splits, buffer_size, show_progress)
    count_splits([split.path for split in splits], counter, show_progress)

    print(f"Selecting top {limit:,} phrases...")
    top_phrases = counter.top_phrases(limit)

    write_results(top_phrases, output_file, append=append, encoding=encoding)

    if cleanup:
        print(f"Cleaning up split files in {tmp_dir}")
        remove_splits(splits, tmp_dir)
    else:
        print(f"Keeping split files in {tmp_dir}")

    return top_phrases


def main(argv=None):
    parser = argparse.ArgumentParser(description="Find the most frequent delimiter-separated phrases in a large file")
    parser.add_argument("input_file", help="Path to the phrases file")
    parser.add_argument("output_file", nargs="?",
                        help="File to append the results to (default: the input file)")
    parser.add_argument("--splits", type=int, default=DEFAULT_NUM_SPLITS,
                        help=f"Number of files to split the input into (default: {DEFAULT_NUM_SPLITS})")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT,
                        help=f"Number of top phrases to keep (default: {DEFAULT_LIMIT:,})")
    parser.add_argument("--buffer-size", type=int, default=DEFAULT_BUFFER_SIZE,
                        help=f"Read/write buffer size in bytes used while splitting (default: {DEFAULT_BUFFER_SIZE})")
    parser.add_argument("--delimiter", default=DEFAULT_DELIMITER,
                        help=f"Phrase delimiter (default: {DEFAULT_DELIMITER})")
    parser.add_argument("--encoding", default=DEFAULT_ENCODING,
                        help=f"Text encoding of the input and output (default: {DEFAULT_ENCODING})")
    parser.add_argument("--tmp-dir", type=str, default=DEFAULT_TMP_DIR,
                        help=f"Directory for split files (default: {DEFAULT_TMP_DIR})")
    parser.add_argument("--cleanup", action="store_true",
                        help="Remove the split files once the results are written")
    parser.add_argument("--overwrite", action="store_true",
                        help="Overwrite the output file instead of appending to it")
    parser.add_argument("--no-progress", action="store_true",
                        help="Hide progress bars")

    args = parser.parse_args(argv)

    if not os.path.exists(args.input_file):
        print(f"Error: Input file {args.input_file} does not exist")
        sys.exit(1)

    start_time = time.time()
    try:
        run(
            args.input_file,
            args.output_file,
            tmp_dir=Path(args.tmp_dir),
            num_splits=args.splits,
            limit=args.limit,
            buffer_size=args.buffer_size,
            delimiter=args.delimiter,
            encoding=args.encoding,
            append=not args.overwrite,
            cleanup=args.cleanup,
            show_progress=not args.no_progress,
        )
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    elapsed_time = time.time() - start_time
    print(f"Total processing time: {elapsed_time:.2f} seconds")


if __name__ == "__main__":
    main()
