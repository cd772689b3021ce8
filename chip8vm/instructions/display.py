"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8vm.state import EmulatorState, check_memory_range
from chip8vm.decode import DecodedInstruction
from chip8vm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH, FLAG_REGISTER

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Pixels falling past the right or bottom edge wrap around to the opposite
    edge. VF is set when any lit pixel is switched off.
    """
    height = instruction.n
    base = check_memory_range(state.I, height)

    sprite_x = state.V[instruction.x] % SCREEN_WIDTH
    sprite_y = state.V[instruction.y] % SCREEN_HEIGHT

    # Offset of every screen cell from the sprite origin, wrapped around both edges
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < height)

    rows = jnp.zeros(SCREEN_HEIGHT, dtype=jnp.uint8).at[:height].set(state.memory[base:base + height])
    sprite_bytes = rows[row_offset]
    shift = jnp.clip(SPRITE_WIDTH - 1 - col_offset, 0, SPRITE_WIDTH - 1)
    sprite = (((sprite_bytes >> shift) & 1) == 1) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        redraw=True
    )
