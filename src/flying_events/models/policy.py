"""
Module: policy.py
Description: Retry policy for event dispatch.

A RetryPolicy is immutable. The client reads it once at the start of
each dispatch call; replacing it affects only later calls.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RetryPolicy(BaseModel):
    """
    Bounded exponential backoff between full delivery attempts.

    Defaults allow 20 retries, starting one minute apart and growing by
    a factor of 5 up to twenty minutes, randomized.

    Attributes:
        max_attempts: Total attempts, including the first one
        backoff_factor: Geometric growth of the delay per attempt
        min_delay_ms: Delay before the second attempt
        max_delay_ms: Upper bound for any delay
        jitter: Draw the actual delay uniformly from [0, delay]
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=21, ge=1)
    backoff_factor: float = Field(default=5.0, gt=1)
    min_delay_ms: int = Field(default=60 * 1000, ge=0)
    max_delay_ms: int = Field(default=20 * 60 * 1000, ge=0)
    jitter: bool = Field(default=True)

    @model_validator(mode='after')
    def validate_delay_bounds(self) -> "RetryPolicy":
        if self.max_delay_ms < self.min_delay_ms:
            raise ValueError("max_delay_ms must be greater than or equal to min_delay_ms")
        return self

    def base_delay_ms(self, attempt: int) -> float:
        """
        Capped delay scheduled after the given attempt fails.

        Args:
            attempt: 1-based index of the attempt that just failed

        Returns:
            min_delay_ms * backoff_factor ** (attempt - 1), capped at max_delay_ms
        """
        try:
            delay = self.min_delay_ms * self.backoff_factor ** (attempt - 1)
        except OverflowError:
            return float(self.max_delay_ms)
        return min(delay, float(self.max_delay_ms))
