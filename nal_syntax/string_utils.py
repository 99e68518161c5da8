"""
The :py:mod:`nal_syntax.string_utils` module contains a few general purpose
string formatting routines used when describing parsed syntax elements and
parse failures.
"""

from textwrap import dedent

import re

__all__ = [
    "indent",
    "longest_run",
    "ellipsise",
    "wrap_paragraphs",
]


def indent(text, prefix="  "):
    """
    Indent every line of 'text' with the string 'prefix' (including blank
    lines, unlike :py:func:`textwrap.indent`).
    """
    return prefix + ("\n" + prefix).join(text.split("\n"))


def longest_run(sequence):
    """
    Find the longest run of equal consecutive items in a sequence. Returns a
    (start, length) pair; (0, 0) for an empty sequence. The first of several
    equally long runs wins.
    """
    best_start = best_length = 0
    run_start = 0
    for i in range(1, len(sequence) + 1):
        if i == len(sequence) or sequence[i] != sequence[run_start]:
            if i - run_start > best_length:
                best_start, best_length = run_start, i - run_start
            run_start = i
    return (best_start, best_length)


def ellipsise(text, context=4, min_length=8):
    """
    Shorten the longest run of a single repeated character in 'text' by
    replacing its middle with '...'.

    Only the longest run is shortened and runs shorter than ``2*context +
    min_length`` are left alone, so the original can be unambiguously
    recovered given its length. For example::

        >>> ellipsise("0b10100000000000000000000000000000000000001")
        '0b1010000...00001'
    """
    start, length = longest_run(text)
    if length < (2 * context) + min_length:
        return text

    return "{}...{}".format(
        text[: start + context],
        text[start + length - context :],
    )


def wrap_paragraphs(text):
    """
    Normalise a dedented, hard-wrapped multi-paragraph string into one line per
    paragraph. Blank lines separate paragraphs; blocks whose lines are all
    indented (e.g. example commands) are kept verbatim.
    """
    paragraphs = []
    for block in re.split(r"\n\s*\n", dedent(text).strip("\n")):
        lines = block.split("\n")
        if all(line.startswith(" ") for line in lines):
            paragraphs.append(block)
        else:
            paragraphs.append(" ".join(line.strip() for line in lines))
    return "\n\n".join(paragraphs)
