import re
from itertools import chain

from .charsets import (
    CHANGE_CODES, CODE_A, CODE_B, CODE_C, FNC2, FNC3, FNC4, SHIFT, SUBSETS,
    VALUES, is_digit
)
from .encoding import BarcodeEncoding
from .shortest import best_subset_for_data


_CHANGE_CODE_RE = re.compile("([{}])".format(CHANGE_CODES))


class Code128(BarcodeEncoding):
    """
    Encoder for Code128 (A, B and C subset) barcode.

    A barcode is a chain of segments, every segment encodes its data in
    a single subset. A subset change character inside the data ends the
    segment, the rest of the data becomes its ``extra``: another Code128
    segment, which can itself have an extra.

    When no subset is given, change characters are planned automatically
    to get the shortest barcode.
    """
    # stripe patterns written as a number, 1 bit for black stripe,
    # 0 bit for white background, 11 bits long
    pattern = [
        1740, 1644, 1638, 1176, 1164, 1100, 1224, 1220, 1124, 1608, 1604,
        1572, 1436, 1244, 1230, 1484, 1260, 1254, 1650, 1628, 1614, 1764,
        1652, 1902, 1868, 1836, 1830, 1892, 1844, 1842, 1752, 1734, 1590,
        1304, 1112, 1094, 1416, 1128, 1122, 1672, 1576, 1570, 1464, 1422,
        1134, 1496, 1478, 1142, 1910, 1678, 1582, 1768, 1762, 1774, 1880,
        1862, 1814, 1896, 1890, 1818, 1914, 1602, 1930, 1328, 1292, 1200,
        1158, 1068, 1062, 1424, 1412, 1232, 1218, 1076, 1074, 1554, 1616,
        1978, 1556, 1146, 1340, 1212, 1182, 1508, 1268, 1266, 1956, 1940,
        1938, 1758, 1782, 1974, 1400, 1310, 1118, 1512, 1506, 1960, 1954,
        1502, 1518, 1886, 1966, 1668, 1680, 1692
    ]

    # start pattern, different for every subset
    start_A = 103
    start_B = 104
    start_C = 105

    # stop pattern including the termination bar, 13 bits long
    stop = 6379
    stop_bitlength = 13

    # bit length of non-control characters
    code_bitlength = 11

    # blank modules around the barcode yielded by bars()
    quiet_zone = 10

    checksum_modulo = 103

    change_codes = {"A": CODE_A, "B": CODE_B, "C": CODE_C}

    # subset a character after SHIFT is taken from
    shift_subsets = {"A": "B", "B": "A"}

    def __init__(self, data, subset=None):
        """
        :param str data:    Data to encode, may contain special characters
        :param str subset:  "A", "B" or "C" (any case), None to choose
                            subsets giving the shortest barcode"""
        data = str(data)
        if subset is None:
            subset, data = best_subset_for_data(data)
        self._owner = None
        self._encoding = None
        self._data = ""
        self._extra = None
        self._subset = None
        self.subset = subset
        self.data = data
        if not self._data and self._extra is None:
            raise ValueError("Data cannot be empty")

    def __str__(self):
        return self.full_data

    def __repr__(self):
        return "{}({!r}, {!r})".format(
            type(self).__name__,
            self.full_data_with_change_codes,
            self._subset
        )

    def __eq__(self, other):
        if not isinstance(other, Code128):
            return NotImplemented
        return (self._subset, self._data, self._extra) == \
            (other._subset, other._data, other._extra)

    __hash__ = None

    @classmethod
    def subset_for(cls, identifier):
        """Subset for a subset name or a subset change character

        :param str identifier:  "A", "B", "C" in any case or CODE_A,
                                CODE_B, CODE_C
        :return:                Subset name"""
        for subset, change_code in cls.change_codes.items():
            if identifier == change_code:
                return subset
        subset = str(identifier).upper()
        if subset not in SUBSETS:
            raise ValueError(
                "Unknown Code128 subset {!r}, expected A, B or C".format(
                    identifier
                )
            )
        return subset

    @classmethod
    def change_code_for(cls, subset):
        return cls.change_codes[cls.subset_for(subset)]

    @classmethod
    def _check_function_characters(cls, subset, data):
        if subset != "C":
            return
        for char in data:
            if char in (FNC2, FNC3, FNC4):
                raise ValueError(
                    "{!r} can't be encoded in code128C alphabet".format(char)
                )

    def _invalidate(self):
        # segments upstream include this one in their encoding
        segment = self
        while segment is not None:
            segment._encoding = None
            segment = segment._owner

    @property
    def subset(self):
        return self._subset

    @subset.setter
    def subset(self, subset):
        subset = self.subset_for(subset)
        self._check_function_characters(subset, self._data)
        self._subset = subset
        self._invalidate()

    @property
    def data(self):
        """Data of this segment only, special characters included"""
        return self._data

    @data.setter
    def data(self, data):
        data, *extra = _CHANGE_CODE_RE.split(str(data), maxsplit=1)
        self._check_function_characters(self._subset, data)
        # the following segment is built first, a failure leaves self as is
        extra = self._segment_for("".join(extra)) if extra else self._extra
        self._data = data
        self._link(extra)

    @property
    def extra(self):
        """The following segment of the chain, None for the last one"""
        return self._extra

    @extra.setter
    def extra(self, extra):
        if extra is not None:
            extra = self._segment_for(extra)
        self._link(extra)

    def _segment_for(self, extra):
        """Segment to follow this one, built from a string starting with
a subset change character or checked when already built"""
        if not isinstance(extra, Code128):
            extra = str(extra)
            if not extra or extra[0] not in CHANGE_CODES:
                raise ValueError(
                    "Extra must begin with a subset change character, "
                    "got {!r}".format(extra)
                )
            return type(self)(extra[1:], self.subset_for(extra[0]))
        owner = self
        while owner is not None:
            if owner is extra:
                raise ValueError("Segment can't extend its own chain")
            owner = owner._owner
        if extra._owner is not None and extra._owner is not self:
            raise ValueError("Segment already belongs to another chain")
        return extra

    def _link(self, extra):
        if self._extra is not None and self._extra is not extra:
            self._extra._owner = None
        if extra is not None:
            extra._owner = self
        self._extra = extra
        self._invalidate()

    @property
    def full_data(self):
        """Data of the whole chain without subset change and shift
characters"""
        data = self._data.replace(SHIFT, "")
        if self._extra is None:
            return data
        return data + self._extra.full_data

    @property
    def full_data_with_change_codes(self):
        """Data of the whole chain as it would be parsed back"""
        if self._extra is None:
            return self._data
        return self._data + self.change_codes[self._extra.subset] + \
            self._extra.full_data_with_change_codes

    @property
    def characters(self):
        """Characters of this segment. Subset C pairs every digit
with the character following it."""
        if self._subset != "C":
            return list(self._data)
        characters = []
        i = 0
        while i < len(self._data):
            step = 2 if is_digit(self._data[i]) else 1
            characters.append(self._data[i:i + step])
            i += step
        return characters

    def _symbols(self):
        """Yields characters of this segment with their symbol value,
None for characters the subset can't encode"""
        values = VALUES[self._subset]
        shifted = False
        for char in self.characters:
            if shifted:
                yield char, VALUES[self.shift_subsets[self._subset]].get(char)
                shifted = False
            else:
                yield char, values.get(char)
                shifted = char == SHIFT and self._subset in self.shift_subsets
        if shifted:
            # shift with no character to apply to
            yield "", None

    def numbers(self):
        """Symbol values of this segment, unencodable characters skipped"""
        return [value for _, value in self._symbols() if value is not None]

    def change_code_number_for(self, segment):
        return VALUES[self._subset].get(self.change_codes[segment.subset])

    def extra_numbers(self):
        """Symbol values of the rest of the chain, change codes included"""
        if self._extra is None:
            return []
        numbers = []
        change_number = self.change_code_number_for(self._extra)
        if change_number is not None:
            numbers.append(change_number)
        numbers.extend(self._extra.numbers())
        numbers.extend(self._extra.extra_numbers())
        return numbers

    def start_number(self):
        return {
            "A": self.start_A,
            "B": self.start_B,
            "C": self.start_C
        }[self._subset]

    def checksum(self):
        """Modulo 103 checksum of the whole chain"""
        checksum = self.start_number()
        numbers = chain(self.numbers(), self.extra_numbers())
        for position, number in enumerate(numbers, 1):
            checksum += number * position
        return checksum % self.checksum_modulo

    def is_valid(self):
        """Whether every segment of the chain can encode its data"""
        if any(value is None for _, value in self._symbols()):
            return False
        if self._extra is None:
            return True
        return self.change_code_number_for(self._extra) is not None and \
            self._extra.is_valid()

    def _pattern(self, number):
        return self.bit_string(self.pattern[number], self.code_bitlength)

    def start_encoding(self):
        return self._pattern(self.start_number())

    def data_encoding(self):
        return "".join(self._pattern(number) for number in self.numbers())

    def extra_encoding(self):
        return "".join(
            self._pattern(number) for number in self.extra_numbers()
        )

    def checksum_encoding(self):
        return self._pattern(self.checksum())

    def stop_encoding(self):
        return self.bit_string(self.stop, self.stop_bitlength)

    def encoding(self):
        """Encodes the chain to a string of modules, "1" for black bar,
"0" for background.

    :return:                Start, data, checksum and stop patterns"""
        if self._encoding is None:
            self._encoding = self.start_encoding() + self.data_encoding() \
                + self.extra_encoding() + self.checksum_encoding() \
                + self.stop_encoding()
        return self._encoding

    def bars(self):
        """Yields bits of barcode (0/1) including quiet zones"""
        yield from self.bits(0, self.quiet_zone)
        for module in self.encoding():
            yield int(module)
        yield from self.bits(0, self.quiet_zone)
