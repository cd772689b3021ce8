"""CHIP-8 ALU operations (8xxx).

Each operation maps ``(vx, vy)`` to ``(result, flag)``. ``flag`` is ``None``
for operations that leave VF alone; otherwise it is written to VF after the
result, so VF holds the flag even when X is F.
"""

from typing import Callable, Optional

import jax.numpy as jnp
from chip8vm.constants import FLAG_REGISTER
from chip8vm.state import EmulatorState
from chip8vm.decode import DecodedInstruction, Op

AluResult = tuple[jnp.ndarray, Optional[jnp.ndarray]]


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + jnp.astype(vy, jnp.int32)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY5 - Subtract: VX -= VY, VF = NOT borrow."""
    not_borrow = jnp.astype(vx >= vy, jnp.uint8)
    result = jnp.astype((jnp.astype(vx, jnp.int32) - vy) & 0xFF, jnp.uint8)
    return result, not_borrow


def alu_shift_right(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY6 - Shift right: VX >>= 1."""
    shifted_bit = vx & 1
    return vx >> 1, shifted_bit


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XY7 - Subtract: VX = VY - VX, VF = NOT borrow."""
    not_borrow = jnp.astype(vy >= vx, jnp.uint8)
    result = jnp.astype((jnp.astype(vy, jnp.int32) - vx) & 0xFF, jnp.uint8)
    return result, not_borrow


def alu_shift_left(vx: jnp.ndarray, vy: jnp.ndarray) -> AluResult:
    """8XYE - Shift left: VX <<= 1."""
    shifted_bit = (vx & 0x80) >> 7
    result = jnp.astype((jnp.astype(vx, jnp.int32) << 1) & 0xFF, jnp.uint8)
    return result, shifted_bit


ALU_OPERATIONS: dict[Op, Callable[[jnp.ndarray, jnp.ndarray], AluResult]] = {
    Op.LD_REG: alu_set,
    Op.OR: alu_or,
    Op.AND: alu_and,
    Op.XOR: alu_xor,
    Op.ADD_REG: alu_add,
    Op.SUB: alu_sub_xy,
    Op.SHR: alu_shift_right,
    Op.SUBN: alu_sub_yx,
    Op.SHL: alu_shift_left,
}


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    result, vf = ALU_OPERATIONS[instruction.op](vx, vy)

    new_V = state.V.at[instruction.x].set(result)
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf)
    return state.replace(V=new_V)
