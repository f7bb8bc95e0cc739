import struct
from math import ceil
from typing import Literal

class Cint:
    ENDIANNESS_TABLE = {
        "little": "<",
        "big": ">",
        "None": ""
    }

    def __init__(self, bits: int, fmt: str, value: int | bytes | bytearray = 0, endianness: Literal["little", "big", "None"] = "None", const: bool = False) -> None:
        self.fmt = self.ENDIANNESS_TABLE[endianness] + fmt
        blen_expected = ceil(bits / 8)
        if struct.calcsize(self.fmt) != blen_expected:
            raise ValueError(f"Format string {self.fmt} does not match expected byte length {blen_expected}!")
        self.ENDIANNESS = endianness
        self.max = (1 << bits) - 1
        self.const = False
        self.value = value
        self.const = const

    @property
    def value(self) -> int:
        return self._value

    @value.setter
    def value(self, value: int | bytes | bytearray) -> None:
        assert not self.const
        match value:
            case int():
                self._value = value & self.max
                self.as_bytes = struct.pack(self.fmt, self._value)
            case bytes() | bytearray():
                self.as_bytes = bytes(value)
                self._value = struct.unpack(self.fmt, self.as_bytes)[0]
            case _:
                raise ValueError("Invalid type!")
        self.bytelen = len(self.as_bytes)

    def __eq__(self, other: object) -> bool:
        match other:
            case Cint():
                return self.as_bytes == other.as_bytes
            case bytes() | bytearray():
                return self.as_bytes == bytes(other)
            case int():
                return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.as_bytes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0x{self._value:0{self.bytelen * 2}X})"

class uint8(Cint):
    def __init__(self, value: int | bytes | bytearray = 0, const: bool = False) -> None:
        super().__init__(8, "B", value, const=const)

class uint32(Cint):
    def __init__(self, value: int | bytes | bytearray = 0, endianness: Literal["little", "big", "None"] = "None", const: bool = False) -> None:
        super().__init__(32, "I", value, endianness, const)
