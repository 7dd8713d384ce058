from abc import ABC, abstractmethod


class BarcodeEncoding(ABC):
    """Linear barcode base class"""
    dimensionality = "linear"

    @classmethod
    def bits(cls, number, bit_length):
        for shift in range(bit_length - 1, -1, -1):
            yield (number >> shift) & 1

    @classmethod
    def bit_string(cls, number, bit_length):
        """Bits of a pattern number as a string of "0" and "1" modules"""
        return "".join(str(bit) for bit in cls.bits(number, bit_length))

    @abstractmethod
    def encoding(self):
        raise NotImplementedError

    @abstractmethod
    def bars(self):
        raise NotImplementedError
