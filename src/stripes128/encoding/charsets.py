"""Code128 character classification and symbol value tables."""

# Special characters travel in-band with the data. They live in a range
# that can't be encoded by any subset, so they never clash with real data.
FNC1 = "\xc1"
FNC2 = "\xc2"
FNC3 = "\xc3"
FNC4 = "\xc4"
CODE_A = "\xc5"
CODE_B = "\xc6"
CODE_C = "\xc7"
SHIFT = "\xc8"

CHANGE_CODES = CODE_A + CODE_B + CODE_C

SUBSETS = ("A", "B", "C")

# categories used when planning the shortest encoding
NUMERIC = "numeric"
CONTROL = "control"
LOWERCASE = "lowercase"
NEUTRAL = "neutral"


def _values_A():
    values = {chr(code): code - 32 for code in range(32, 96)}
    values.update((chr(code), code + 64) for code in range(32))
    values.update({
        FNC3: 96, FNC2: 97, SHIFT: 98, CODE_C: 99,
        CODE_B: 100, FNC4: 101, FNC1: 102
    })
    return values


def _values_B():
    values = {chr(code): code - 32 for code in range(32, 128)}
    values.update({
        FNC3: 96, FNC2: 97, SHIFT: 98, CODE_C: 99,
        FNC4: 100, CODE_A: 101, FNC1: 102
    })
    return values


def _values_C():
    values = {"{:02d}".format(number): number for number in range(100)}
    values.update({CODE_B: 100, CODE_A: 101, FNC1: 102})
    return values


# symbol value of every character (pair of digits for C) per subset
VALUES = {
    "A": _values_A(),
    "B": _values_B(),
    "C": _values_C(),
}


def is_digit(char):
    # str.isdigit accepts other scripts' digits too
    return "0" <= char <= "9" and len(char) == 1


def is_control(char):
    """ASCII 0-31, a "symbology element" only subset A can encode"""
    return len(char) == 1 and ord(char) < 32


def is_lowercase(char):
    """ASCII 96-127, encodable only by subset B"""
    return len(char) == 1 and 96 <= ord(char) < 128


def digit_weight(char):
    """Number of digits a unit counts for when sizing a numeric run.

    FNC1 is worth two digits, as it takes a whole subset C symbol."""
    if char == FNC1:
        return 2
    if is_digit(char):
        return 1
    return 0


def category(char):
    """Classify a single data unit for the shortest encoding planner.

    :param str char:    A character
    :return:            NUMERIC, CONTROL, LOWERCASE, NEUTRAL or None when
                        no subset can encode the character"""
    if is_digit(char):
        return NUMERIC
    if is_control(char):
        return CONTROL
    if is_lowercase(char):
        return LOWERCASE
    if char in (FNC1, FNC2, FNC3, FNC4) or 32 <= ord(char) < 96:
        return NEUTRAL
    return None


def subsets_for(char):
    """Subsets able to encode a single data unit

    :param str char:    A character
    :return:            Tuple of subset names, empty if unencodable"""
    if is_digit(char) or char == FNC1:
        return ("A", "B", "C")
    kind = category(char)
    if kind == CONTROL:
        return ("A",)
    if kind == LOWERCASE:
        return ("B",)
    if kind == NEUTRAL:
        return ("A", "B")
    return ()
