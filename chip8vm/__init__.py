"""CHIP-8 virtual machine package."""

from chip8vm.state import EmulatorState, create_state
from chip8vm.emulator import execute, load_rom, fetch, tick_timers
from chip8vm.decode import DecodedInstruction, Op, decode, disassemble
from chip8vm.machine import Machine
from chip8vm.errors import (
    Chip8Error, RomTooLarge, CallStackOverflow, CallStackUnderflow,
    UnimplementedOpcode, MemoryAddressOutOfRange
)
from chip8vm.constants import *

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "load_rom",
    "tick_timers",
    "DecodedInstruction",
    "Op",
    "decode",
    "disassemble",
    "Machine",
    "Chip8Error",
    "RomTooLarge",
    "CallStackOverflow",
    "CallStackUnderflow",
    "UnimplementedOpcode",
    "MemoryAddressOutOfRange",
    "PROGRAM_START",
    "FONT_START",
    "FONT_DATA",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "MAX_ROM_SIZE",
    "TIMER_FREQUENCY",
]
