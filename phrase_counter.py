#!/usr/bin/env python3
"""
Phrase Frequency Counter

Counts delimiter-separated phrases across one or more text files and selects the
most frequent ones.

Complexity:
- Building the counts is O(N), where N is the total number of phrases read.
- Selecting the top phrases is O(m log n), where m is the number of unique
  phrases and n is the number of phrases to select.
"""

import sys
import heapq
import codecs
import argparse
from collections import Counter
from operator import itemgetter
from pathlib import Path

DEFAULT_DELIMITER = "|"
DEFAULT_ENCODING = "utf-8"
DEFAULT_LIMIT = 100000


class OutputWriteError(OSError):
    """Raised when the rendered top phrases could not be written out."""


class PhraseCounter:
    """
    Accumulates phrase -> count totals across every stream fed into it.

    Counts live in a Counter, which keeps dict ordering, so iteration order is
    the order in which each phrase was first seen. select_top_phrases relies on
    that order to break ties.
    """
    def __init__(self, delimiter=DEFAULT_DELIMITER, encoding=DEFAULT_ENCODING):
        if not delimiter:
            raise ValueError("delimiter must not be empty")
        try:
            codecs.lookup(encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {encoding}") from e
        self.delimiter = delimiter
        self.encoding = encoding
        self.phrase_counts = Counter()
        self.total_phrases = 0
        self.skipped_files = []

    def __len__(self):
        return len(self.phrase_counts)

    def extract_phrases(self, line):
        """
        Split one line into phrases.

        Line endings are removed and the rest is split on the literal delimiter.
        Empty tokens (blank lines, leading, trailing or doubled delimiters) are
        dropped; nothing else is trimmed.
        """
        line = line.rstrip("\r\n")
        return [phrase for phrase in line.split(self.delimiter) if phrase]

    def add_line(self, line):
        """Count every phrase on a line, returning how many were added."""
        phrases = self.extract_phrases(line)
        self.phrase_counts.update(phrases)
        self.total_phrases += len(phrases)
        return len(phrases)

    def add_stream(self, stream):
        """Count the phrases of every line of a text stream."""
        added = 0
        for line in stream:
            added += self.add_line(line)
        return added

    def add_file(self, path):
        """
        Count the phrases of one file.

        A missing or unreadable file is reported and contributes nothing, so one
        bad split does not stop the others from being counted. A file that fails
        partway through adds nothing either.
        """
        file_counter = PhraseCounter(self.delimiter, self.encoding)
        try:
            # Splits are cut at byte offsets, so a multi-byte character may be torn in two
            with open(path, "r", encoding=self.encoding, errors="replace") as f:
                file_counter.add_stream(f)
        except OSError as e:
            print(f"Warning: Error reading {path}: {e}. Skipping this file.")
            self.skipped_files.append(path)
            return 0

        self.merge(file_counter)
        return file_counter.total_phrases

    def merge(self, other):
        """Add the counts of another PhraseCounter (or plain mapping) into this one."""
        counts = other.phrase_counts if isinstance(other, PhraseCounter) else other
        self.phrase_counts.update(counts)
        self.total_phrases += sum(counts.values())
        return self

    def top_phrases(self, limit=DEFAULT_LIMIT):
        return select_top_phrases(self.phrase_counts, limit)


def select_top_phrases(phrase_counts, limit=DEFAULT_LIMIT):
    """
    Return the `limit` most frequent (phrase, count) pairs, highest count first.

    Equal counts keep the mapping's iteration order, so the phrase inserted first
    wins a tie. heapq.nlargest is stable in the same way as sorted(reverse=True),
    which lets the bounded selection stand in for a full sort.
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")
    if limit == 0:
        return []

    items = phrase_counts.items()
    if limit < len(phrase_counts):
        return heapq.nlargest(limit, items, key=itemgetter(1))
    return sorted(items, key=itemgetter(1), reverse=True)


def format_top_phrases(top_phrases):
    """Render the pairs as {phrase=count, ...} in result order."""
    return "{" + ", ".join(f"{phrase}={count}" for phrase, count in top_phrases) + "}"


def write_results(top_phrases, output_file, append=True, encoding=DEFAULT_ENCODING):
    """
    Write the rendered top phrases to output_file.

    Appends by default, so output from repeated runs accumulates in the same file.
    Failures are raised as OutputWriteError.
    """
    mode = "a" if append else "w"
    try:
        Path(output_file).parent.mkdir(exist_ok=True, parents=True)
        with open(output_file, mode, encoding=encoding) as f:
            f.write(format_top_phrases(top_phrases))
            f.write("\n")
    except OSError as e:
        raise OutputWriteError(f"Could not write results to {output_file}: {e}") from e

    print(f"Results written to {output_file}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Count delimiter-separated phrases in text files")
    parser.add_argument("input_files", nargs="+", help="Text files to count phrases in")
    parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT,
                        help=f"Number of top phrases to print (default: {DEFAULT_LIMIT})")
    parser.add_argument("--delimiter", default=DEFAULT_DELIMITER,
                        help=f"Phrase delimiter (default: {DEFAULT_DELIMITER})")
    args = parser.parse_args(argv)

    try:
        counter = PhraseCounter(args.delimiter)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    for input_file in args.input_files:
        counter.add_file(input_file)

    for phrase, count in counter.top_phrases(args.limit):
        sys.stdout.write(f"{count}\t{phrase}\n")


if __name__ == "__main__":
    main()
