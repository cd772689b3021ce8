"""CHIP-8 instruction decoding.

Decoding turns a raw 16-bit word into a ``DecodedInstruction`` tagged with
an ``Op`` variant, so execution is a single dispatch over ``Op`` and decode
can be tested on its own.
"""

import enum
from typing import Iterator, Optional

from chex import dataclass

from chip8vm.constants import PROGRAM_START
from chip8vm.errors import UnimplementedOpcode


class Op(enum.IntEnum):
    """Instruction forms, named after their conventional mnemonics."""
    CLS = enum.auto()        # 00E0
    RET = enum.auto()        # 00EE
    JP = enum.auto()         # 1NNN
    CALL = enum.auto()       # 2NNN
    SE_IMM = enum.auto()     # 3XNN
    SNE_IMM = enum.auto()    # 4XNN
    SE_REG = enum.auto()     # 5XY0
    LD_IMM = enum.auto()     # 6XNN
    ADD_IMM = enum.auto()    # 7XNN
    LD_REG = enum.auto()     # 8XY0
    OR = enum.auto()         # 8XY1
    AND = enum.auto()        # 8XY2
    XOR = enum.auto()        # 8XY3
    ADD_REG = enum.auto()    # 8XY4
    SUB = enum.auto()        # 8XY5
    SHR = enum.auto()        # 8XY6
    SUBN = enum.auto()       # 8XY7
    SHL = enum.auto()        # 8XYE
    SNE_REG = enum.auto()    # 9XY0
    LD_I = enum.auto()       # ANNN
    JP_V0 = enum.auto()      # BNNN
    RND = enum.auto()        # CXNN
    DRW = enum.auto()        # DXYN
    SKP = enum.auto()        # EX9E
    SKNP = enum.auto()       # EXA1
    LD_VX_DT = enum.auto()   # FX07
    LD_VX_K = enum.auto()    # FX0A
    LD_DT_VX = enum.auto()   # FX15
    LD_ST_VX = enum.auto()   # FX18
    ADD_I_VX = enum.auto()   # FX1E
    LD_F_VX = enum.auto()    # FX29
    LD_B_VX = enum.auto()    # FX33
    LD_I_VX = enum.auto()    # FX55
    LD_VX_I = enum.auto()    # FX65


# Groups whose form is fully determined by the top nibble.
_SIMPLE_OPS = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_IMM,
    0x4: Op.SNE_IMM,
    0x6: Op.LD_IMM,
    0x7: Op.ADD_IMM,
    0xA: Op.LD_I,
    0xB: Op.JP_V0,
    0xC: Op.RND,
    0xD: Op.DRW,
}

_SYSTEM_OPS = {0x00E0: Op.CLS, 0x00EE: Op.RET}

_ALU_OPS = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS = {0x9E: Op.SKP, 0xA1: Op.SKNP}

_MISC_OPS = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.LD_I_VX,
    0x65: Op.LD_VX_I,
}

_MNEMONICS = {
    Op.CLS: "CLS",
    Op.RET: "RET",
    Op.JP: "JP 0x{nnn:03X}",
    Op.CALL: "CALL 0x{nnn:03X}",
    Op.SE_IMM: "SE V{x:X}, 0x{nn:02X}",
    Op.SNE_IMM: "SNE V{x:X}, 0x{nn:02X}",
    Op.SE_REG: "SE V{x:X}, V{y:X}",
    Op.LD_IMM: "LD V{x:X}, 0x{nn:02X}",
    Op.ADD_IMM: "ADD V{x:X}, 0x{nn:02X}",
    Op.LD_REG: "LD V{x:X}, V{y:X}",
    Op.OR: "OR V{x:X}, V{y:X}",
    Op.AND: "AND V{x:X}, V{y:X}",
    Op.XOR: "XOR V{x:X}, V{y:X}",
    Op.ADD_REG: "ADD V{x:X}, V{y:X}",
    Op.SUB: "SUB V{x:X}, V{y:X}",
    Op.SHR: "SHR V{x:X}",
    Op.SUBN: "SUBN V{x:X}, V{y:X}",
    Op.SHL: "SHL V{x:X}",
    Op.SNE_REG: "SNE V{x:X}, V{y:X}",
    Op.LD_I: "LD I, 0x{nnn:03X}",
    Op.JP_V0: "JP V0, 0x{nnn:03X}",
    Op.RND: "RND V{x:X}, 0x{nn:02X}",
    Op.DRW: "DRW V{x:X}, V{y:X}, {n}",
    Op.SKP: "SKP V{x:X}",
    Op.SKNP: "SKNP V{x:X}",
    Op.LD_VX_DT: "LD V{x:X}, DT",
    Op.LD_VX_K: "LD V{x:X}, K",
    Op.LD_DT_VX: "LD DT, V{x:X}",
    Op.LD_ST_VX: "LD ST, V{x:X}",
    Op.ADD_I_VX: "ADD I, V{x:X}",
    Op.LD_F_VX: "LD F, V{x:X}",
    Op.LD_B_VX: "LD B, V{x:X}",
    Op.LD_I_VX: "LD [I], V{x:X}",
    Op.LD_VX_I: "LD V{x:X}, [I]",
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    op: Op
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def mnemonic(self) -> str:
        """Assembler rendering, e.g. ``DRW V0, V1, 5``."""
        return _MNEMONICS[self.op].format(x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn)


def _classify(instruction: int) -> Optional[Op]:
    group = (instruction & 0xF000) >> 12
    if group in _SIMPLE_OPS:
        return _SIMPLE_OPS[group]
    if group == 0x0:
        return _SYSTEM_OPS.get(instruction)
    if group == 0x5:
        return Op.SE_REG if instruction & 0x000F == 0 else None
    if group == 0x9:
        return Op.SNE_REG if instruction & 0x000F == 0 else None
    if group == 0x8:
        return _ALU_OPS.get(instruction & 0x000F)
    if group == 0xE:
        return _KEY_OPS.get(instruction & 0x00FF)
    return _MISC_OPS.get(instruction & 0x00FF)


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components.

    Raises:
        UnimplementedOpcode: if the word matches no instruction form.
    """
    instruction = int(instruction) & 0xFFFF
    op = _classify(instruction)
    if op is None:
        raise UnimplementedOpcode(instruction)
    return DecodedInstruction(
        raw=instruction,
        op=op,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )


def disassemble(rom: bytes, origin: int = PROGRAM_START) -> Iterator[tuple[int, int, str]]:
    """Yield ``(address, opcode, text)`` for each 16-bit word of a ROM.

    Words that do not decode are rendered as data. A trailing odd byte is
    padded with zero.
    """
    rom = bytes(rom)
    for offset in range(0, len(rom), 2):
        word = rom[offset:offset + 2].ljust(2, b"\x00")
        opcode = (word[0] << 8) | word[1]
        try:
            text = decode(opcode).mnemonic
        except UnimplementedOpcode:
            text = f"DW 0x{opcode:04X}"
        yield origin + offset, opcode, text
