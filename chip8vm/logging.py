"""Console logging utilities for the CHIP-8 machine.

This module provides a small leveled console logger and an emulator-specific
subclass with helpers for program loading, instruction tracing and faults.
"""

import time
import sys
from typing import Optional

from chip8vm.decode import DecodedInstruction


class ConsoleLogger:
    """Flexible console logger with level filtering and colors."""

    def __init__(
        self,
        name: str = "chip8vm",
        log_level: str = "INFO",
        use_colors: bool = True,
        show_timestamps: bool = True,
    ):
        self.name = name
        self.log_level = log_level.upper()
        self.use_colors = (
            use_colors and hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
        )
        self.show_timestamps = show_timestamps
        self.start_time = time.time()

        self.colors = (
            {
                "DEBUG": "\033[36m",
                "INFO": "\033[32m",
                "WARNING": "\033[33m",
                "ERROR": "\033[31m",
                "CRITICAL": "\033[35m",
                "RESET": "\033[0m"
            }
            if self.use_colors
            else {
                k: ""
                for k in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "RESET"]
            }
        )

        self.level_order = {
            "DEBUG": 0,
            "INFO": 1,
            "WARNING": 2,
            "ERROR": 3,
            "CRITICAL": 4,
        }
        if self.log_level not in self.level_order:
            raise ValueError(
                f"Unknown log level '{log_level}'. Available: {list(self.level_order.keys())}"
            )

    def is_enabled_for(self, level: str) -> bool:
        """Check if message should be logged based on current log level."""
        return self.level_order.get(level.upper(), 1) >= self.level_order.get(
            self.log_level, 1
        )

    def _format_message(self, level: str, message: str) -> str:
        """Format log message with timestamp, level, and colors."""
        timestamp = (
            f"[{time.time() - self.start_time:8.2f}s]" if self.show_timestamps else ""
        )
        level_str = f"[{level:>8s}]"
        name_str = f"[{self.name}]"

        if self.use_colors:
            color = self.colors.get(level.upper(), "")
            reset = self.colors["RESET"]
            level_str = f"{color}{level_str}{reset}"

        return f"{timestamp}{level_str}{name_str} {message}"

    def log(self, level: str, message: str):
        """Log a message at the specified level."""
        if self.is_enabled_for(level):
            formatted = self._format_message(level, message)
            print(formatted, flush=True)

    def debug(self, message: str):
        """Log debug message."""
        self.log("DEBUG", message)

    def info(self, message: str):
        """Log info message."""
        self.log("INFO", message)

    def warning(self, message: str):
        """Log warning message."""
        self.log("WARNING", message)

    def error(self, message: str):
        """Log error message."""
        self.log("ERROR", message)

    def critical(self, message: str):
        """Log critical message."""
        self.log("CRITICAL", message)


class EmulatorLogger(ConsoleLogger):
    """Specialized logger for machine lifecycle and instruction traces."""

    def __init__(self, name: str = "chip8vm", **kwargs):
        super().__init__(name, **kwargs)
        self.instruction_count = 0

    def log_reset(self):
        """Log a machine reset."""
        self.instruction_count = 0
        self.debug("Machine reset, PC = 0x200")

    def log_program_loaded(self, size: int, capacity: Optional[int] = None):
        """Log a successful program load."""
        if capacity:
            self.info(f"Loaded program: {size} bytes ({size / capacity * 100:.1f}% of program space)")
        else:
            self.info(f"Loaded program: {size} bytes")

    def log_instruction(self, pc: int, instruction: DecodedInstruction):
        """Trace one executed instruction at DEBUG level."""
        self.instruction_count += 1
        if self.is_enabled_for("DEBUG"):
            self.debug(
                f"#{self.instruction_count:<8d} 0x{pc:03X}: {instruction.raw:04X}  {instruction.mnemonic}"
            )

    def log_fault(self, pc: int, error: Exception):
        """Log a machine fault."""
        self.error(f"Fault at 0x{pc:03X}: {type(error).__name__}: {error}")
