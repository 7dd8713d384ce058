"""Planning of subset changes giving the shortest Code128 barcode.

Follows the GS1-128 guideline for minimising symbol length:

* Start with subset C when the data is two digits or begins with four
  or more digits, with subset A when a control character comes before
  any lowercase character, with subset B otherwise.
* Runs of four or more digits are encoded in subset C. When such a run
  has an odd length, its first digit (last one for a run starting the
  data) stays in subset A or B.
* A single character foreign to the current subset is shifted when the
  next character exclusive to A or B belongs to the current subset,
  otherwise the subset changes.

FNC1 counts as two digits when sizing numeric runs holding digits.
"""
import logging
import re

from .charsets import (
    CODE_A, CODE_B, CODE_C, FNC1, SHIFT, digit_weight, is_control, is_digit,
    is_lowercase
)

logger = logging.getLogger(__name__)

# shortest run of digits worth switching to subset C in the middle of data
MIN_NUMERIC_RUN = 4

_NUMERIC_RUN_RE = re.compile("[0-9{}]+".format(FNC1))

_CHANGE_CODES = {"A": CODE_A, "B": CODE_B, "C": CODE_C}
_SUBSETS = {CODE_A: "A", CODE_B: "B", CODE_C: "C"}


def _weight(run):
    return sum(digit_weight(char) for char in run)


def _pairable_prefix(run):
    """Longest prefix of a run of digits and FNC1 that subset C can
encode, i.e. made of digit pairs and FNC1 characters"""
    i = 0
    while i < len(run):
        if run[i] == FNC1:
            i += 1
        elif i + 1 < len(run) and is_digit(run[i + 1]):
            i += 2
        else:
            break
    return run[:i]


def _split_run(run, leading):
    """Splits a run of digits and FNC1 characters around the part that
can be encoded in subset C.

    :param str run:         Digits and FNC1 characters
    :param bool leading:    Whether the run starts the data
    :return:                Tuple of strings: part left to the text before
                            the run, part for subset C and part left to
                            the text after the run"""
    numeric = _pairable_prefix(run)
    if leading or numeric == run:
        return "", numeric, run[len(numeric):]
    # Change to subset C right after the first digit. Kept only when
    # it covers the rest of the run or at least as much of it.
    first_digit = next(i for i, char in enumerate(run) if is_digit(char))
    before, rest = run[:first_digit + 1], run[first_digit + 1:]
    shifted = _pairable_prefix(rest)
    if shifted == rest or _weight(shifted) >= _weight(numeric):
        return before, shifted, rest[len(shifted):]
    return "", numeric, run[len(numeric):]


def _partition(data):
    """Yields tuples (segment, numeric) of alternating numeric and
non-numeric segments of data"""
    text = ""
    position = 0
    for match in _NUMERIC_RUN_RE.finditer(data):
        run = match.group()
        text += data[position:match.start()]
        position = match.end()
        before, numeric, after = _split_run(run, match.start() == 0)
        weight = _weight(numeric)
        # FNC1 alone saves nothing in subset C, it needs a digit pair
        paired = any(is_digit(char) for char in numeric)
        if paired and (weight >= MIN_NUMERIC_RUN or
                       (numeric == data and weight == 2)):
            text += before
            if text:
                yield text, False
            yield numeric, True
            text = after
        else:
            text += run
    text += data[position:]
    if text:
        yield text, False


def split_numeric_runs(data):
    """Splits data into alternating segments worth encoding in subset C
and segments for subsets A and B.

    :param str data:    Data without subset change characters
    :return:            List of non-empty strings, joining to data"""
    return [segment for segment, _ in _partition(data)]


def _control_before_lowercase(text):
    for char in text:
        if is_control(char):
            return True
        if is_lowercase(char):
            return False
    return False


def _exclusive_subset(char):
    if is_control(char):
        return "A"
    if is_lowercase(char):
        return "B"
    return None


def _encode_text(text):
    """Inserts subset changes and shifts into non-numeric text

    :param str text:    Text with no run worth encoding in subset C
    :return:            Text starting with CODE_A or CODE_B"""
    # subset of the first character only A or B can encode after each index
    following = [None] * len(text)
    upcoming = None
    for index in range(len(text) - 1, -1, -1):
        following[index] = upcoming
        upcoming = _exclusive_subset(text[index]) or upcoming

    subset = "A" if _control_before_lowercase(text) else "B"
    out = [_CHANGE_CODES[subset]]
    for index, char in enumerate(text):
        required = _exclusive_subset(char)
        if required is not None and required != subset:
            if following[index] == subset:
                logger.debug("Shift to subset %s for %r", required, char)
                out.append(SHIFT)
            else:
                logger.debug("Change to subset %s for %r", required, char)
                subset = required
                out.append(_CHANGE_CODES[subset])
        out.append(char)
    return "".join(out)


def shortest_encoding(data):
    """Inserts subset change and shift characters into data so that it
encodes to the shortest Code128 barcode.

    :param str data:    Data without subset change characters
    :return:            Data starting with the change character of
                        the start subset, empty string for no data"""
    parts = []
    for segment, numeric in _partition(data):
        if numeric:
            parts.append(CODE_C + segment)
        else:
            parts.append(_encode_text(segment))
    encoded = "".join(parts)
    logger.debug("Shortest encoding of %r is %r", data, encoded)
    return encoded


def best_subset_for_data(data):
    """Start subset and data with change characters for the shortest
barcode

    :param str data:    Data without subset change characters
    :return:            Tuple (subset, data)"""
    encoded = shortest_encoding(data)
    if not encoded:
        return "B", encoded
    return _SUBSETS[encoded[0]], encoded[1:]
