"""Non-blocking keyboard input for the timer controls."""

import select
import sys
import termios
import tty
from typing import Optional


class KeyboardHandler:
    """Reads single keypresses from a cbreak-mode terminal without blocking."""

    def __init__(self):
        self.fd = sys.stdin.fileno()
        self.old_settings = None
        self._setup()

    def _setup(self):
        try:
            self.old_settings = termios.tcgetattr(self.fd)
            tty.setcbreak(self.fd)
        except termios.error:
            # not a tty (piped input); keys simply never arrive
            self.old_settings = None

    def get_key(self) -> Optional[str]:
        """Return the pressed key (lower-cased) or None if nothing is waiting."""
        if not select.select([sys.stdin], [], [], 0)[0]:
            return None
        key = sys.stdin.read(1)
        return key.lower() if key else None

    def stop(self):
        """Restore terminal settings."""
        if self.old_settings:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self.old_settings)
            self.old_settings = None
