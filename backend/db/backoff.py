from dataclasses import dataclass


@dataclass(frozen=True)
class BackoffPolicy:
    """Bounded exponential backoff shared by connection init and query retry.

    ``delay(n)`` is the pause after failed attempt ``n`` (1-based):
    ``base_delay * 2 ** (n - 1)``.
    """

    max_attempts: int = 3
    base_delay: float = 0.1

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0:
            raise ValueError("base_delay must be >= 0")

    def delay(self, attempt: int) -> float:
        return self.base_delay * (2 ** (attempt - 1))

    def attempts(self):
        """Yield attempt numbers 1..max_attempts."""
        return range(1, self.max_attempts + 1)

    def is_last(self, attempt: int) -> bool:
        return attempt >= self.max_attempts


# Connection open: 3 attempts, 2s then 4s between them
INIT_POLICY = BackoffPolicy(max_attempts=3, base_delay=2.0)
# Statement execution on busy/locked: 3 attempts, 100ms then 200ms
QUERY_POLICY = BackoffPolicy(max_attempts=3, base_delay=0.1)
