"""Caller-owned CHIP-8 machine.

``Machine`` holds one ``EmulatorState`` and exposes the operations a host
driver needs: reset and program loading, single-instruction stepping, the
60 Hz timer tick, keypad latches and framebuffer access. Every operation is
a pure state transition committed only on success, so a fault leaves the
machine exactly as it was before the call.
"""

from typing import Optional, Sequence, Union

import jax
import jax.numpy as jnp
import numpy as np

from chip8vm.constants import MAX_ROM_SIZE, NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
from chip8vm.decode import Op, decode
from chip8vm.emulator import execute_decoded, fetch, load_rom, tick_timers
from chip8vm.errors import Chip8Error
from chip8vm.logging import EmulatorLogger
from chip8vm.state import EmulatorState, create_state

_FRAMEBUFFER_OPS = (Op.CLS, Op.DRW)


def _read_only(array) -> np.ndarray:
    view = np.array(array)
    view.setflags(write=False)
    return view


class Machine:
    """A CHIP-8 virtual machine.

    The machine is not thread-safe: ``step``, ``tick_timers`` and key events
    must be serialized by the caller.

    Args:
        seed: Seed for the random number generator used by CXNN
        logger: Logger receiving lifecycle, trace and fault messages
        log_level: Level for the default logger when ``logger`` is not given
    """

    def __init__(
        self,
        seed: int = 0,
        logger: Optional[EmulatorLogger] = None,
        log_level: str = "WARNING",
    ):
        self.seed = seed
        self.logger = logger or EmulatorLogger(log_level=log_level)
        self.state: EmulatorState = create_state(jax.random.PRNGKey(seed))
        self.current_opcode: Optional[int] = None

    def reset(self):
        """Return to power-on state: memory cleared, font installed, PC = 0x200."""
        self.state = create_state(jax.random.PRNGKey(self.seed))
        self.current_opcode = None
        self.logger.log_reset()

    def load_program(self, rom: Union[bytes, bytearray, Sequence[int]]):
        """Reset and copy ``rom`` into program space at 0x200.

        Raises:
            RomTooLarge: if ``rom`` exceeds 3584 bytes. The machine is left
                freshly reset.
        """
        self.reset()
        rom_data = bytes(rom)
        self.state = load_rom(self.state, rom_data)
        self.logger.log_program_loaded(len(rom_data), MAX_ROM_SIZE)

    def step(self) -> bool:
        """Execute one instruction.

        Returns:
            True if the instruction changed the framebuffer.

        Raises:
            Chip8Error: on any machine fault; the state is left untouched.
        """
        pc = int(self.state.pc)
        try:
            state, opcode = fetch(self.state)
            self.current_opcode = opcode
            instruction = decode(opcode)
            state = execute_decoded(state, instruction)
        except Chip8Error as error:
            self.logger.log_fault(pc, error)
            raise

        self.state = state
        self.logger.log_instruction(pc, instruction)
        return instruction.op in _FRAMEBUFFER_OPS

    def tick_timers(self):
        """Count the delay and sound timers down; call at 60 Hz."""
        self.state = tick_timers(self.state)

    # Keypad

    def _check_key(self, index: int) -> int:
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in 0..{NUM_KEYS - 1}, got {index}")
        return index

    def set_key_down(self, index: int):
        """Latch key ``index`` (0x0-0xF) as pressed."""
        index = self._check_key(index)
        self.state = self.state.replace(keypad=self.state.keypad.at[index].set(True))

    def set_key_up(self, index: int):
        """Release key ``index`` (0x0-0xF)."""
        index = self._check_key(index)
        self.state = self.state.replace(keypad=self.state.keypad.at[index].set(False))

    def release_all_keys(self):
        """Release every key, e.g. when the host window loses focus."""
        self.state = self.state.replace(keypad=jnp.zeros_like(self.state.keypad))

    # Framebuffer

    @property
    def framebuffer(self) -> np.ndarray:
        """Read-only copy of the display, shape (64, 32), indexed ``[x, y]``."""
        return _read_only(self.state.display)

    def pixel(self, x: int, y: int) -> bool:
        if not (0 <= x < SCREEN_WIDTH and 0 <= y < SCREEN_HEIGHT):
            raise ValueError(f"Pixel ({x}, {y}) is outside the {SCREEN_WIDTH}x{SCREEN_HEIGHT} screen")
        return bool(self.state.display[x, y])

    @property
    def redraw_pending(self) -> bool:
        return bool(self.state.redraw)

    def acknowledge_redraw(self):
        """Clear the redraw flag once the frame has been presented."""
        self.state = self.state.replace(redraw=False)

    # Introspection

    @property
    def pc(self) -> int:
        return int(self.state.pc)

    @property
    def index(self) -> int:
        return int(self.state.I)

    @property
    def registers(self) -> tuple[int, ...]:
        return tuple(int(v) for v in self.state.V)

    @property
    def stack_pointer(self) -> int:
        return int(self.state.stack.pointer)

    @property
    def memory(self) -> np.ndarray:
        return _read_only(self.state.memory)

    @property
    def delay_timer(self) -> int:
        return int(self.state.delay_timer)

    @property
    def sound_timer(self) -> int:
        return int(self.state.sound_timer)

    @property
    def sound_active(self) -> bool:
        """True while the sound timer is running."""
        return self.sound_timer > 0
