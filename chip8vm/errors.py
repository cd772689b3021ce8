"""CHIP-8 machine faults.

Every fault is raised to the caller of ``Machine.step`` or
``Machine.load_program``; the machine state is left as it was before the
failing call.
"""


class Chip8Error(Exception):
    """Base error for CHIP-8 machine faults."""


class RomTooLarge(Chip8Error):
    """Raised when a program does not fit in program space."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, program space holds {capacity}")


class CallStackOverflow(Chip8Error):
    """Raised by 2NNN when all stack levels are in use."""

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"call stack overflow pushing return address 0x{address:03X}")


class CallStackUnderflow(Chip8Error):
    """Raised by 00EE with an empty stack."""

    def __init__(self):
        super().__init__("return with empty call stack")


class UnimplementedOpcode(Chip8Error):
    """Raised when an opcode matches no known instruction form."""

    def __init__(self, opcode: int):
        self.opcode = opcode
        super().__init__(f"unimplemented opcode 0x{opcode:04X}")


class MemoryAddressOutOfRange(Chip8Error):
    """Raised when an access would touch memory outside 0x000-0xFFF."""

    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        if length == 1:
            message = f"memory address 0x{address:X} out of range"
        else:
            message = f"memory range 0x{address:X}+{length} out of range"
        super().__init__(message)
