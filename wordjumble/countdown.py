from __future__ import annotations


class Countdown:
    """
    Cancelable one-second-granularity countdown.

    The countdown never schedules anything itself; an external clock calls
    tick(). Once cancelled or expired, further ticks are ignored.
    """

    def __init__(self, seconds: int):
        if seconds <= 0:
            raise ValueError(f"Countdown needs a positive duration, got {seconds}")
        self.seconds = seconds
        self.remaining = seconds
        self.running = False

    def start(self) -> None:
        self.remaining = self.seconds
        self.running = True

    def tick(self) -> bool:
        """
        Advance by one second.

        Returns:
            True only on the tick that reaches zero.
        """
        if not self.running:
            return False
        self.remaining = max(0, self.remaining - 1)
        if self.remaining == 0:
            self.running = False
            return True
        return False

    def cancel(self) -> None:
        """Stop counting, keeping the remaining time."""
        self.running = False
