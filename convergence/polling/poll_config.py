from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class PollConfig:
    """
    Per-node polling budget.

    The delay between attempts is fixed. Probes are cheap and convergence
    latency in the target system is short and roughly known, so returning
    as soon as the condition holds matters more than probe load.
    """

    max_attempts: int = 60
    delay: float = 1.0  # seconds

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        if self.delay < 0:
            raise ValueError("delay must not be negative")

    @property
    def max_wait_seconds(self) -> float:
        return (self.max_attempts - 1) * self.delay
