"""Exceptions raised by the unique id generator."""

from __future__ import annotations


class UniqueIdGenerationError(RuntimeError):
    """Base class for every error raised while generating ids."""


class CorruptDataError(UniqueIdGenerationError):
    """Raised when the store returns a value that is not a 64-bit integer."""

    def __init__(self, scope_name: str, data: object) -> None:
        self.scope_name = scope_name
        self.data = data
        super().__init__(
            f"The id seed returned from storage for scope '{scope_name}' was corrupt, "
            f"and could not be parsed as a 64-bit integer. The data returned was: {data!r}"
        )


class ContentionExceededError(UniqueIdGenerationError):
    """Raised when every compare-and-swap attempt against the store failed."""

    def __init__(self, scope_name: str, attempts: int) -> None:
        self.scope_name = scope_name
        self.attempts = attempts
        super().__init__(
            f"Failed to update the data store for scope '{scope_name}' after {attempts} "
            "attempts. This likely represents too much contention against the store. "
            "Increase the batch size to a value more appropriate to your generation load."
        )


class InvalidSeedError(UniqueIdGenerationError):
    """Raised when a seed would rewind a scope below ids already claimed."""

    def __init__(self, scope_name: str, seed: int, next_id: int) -> None:
        self.scope_name = scope_name
        self.seed = seed
        self.next_id = next_id
        super().__init__(
            f"Seed value {seed} for scope '{scope_name}' cannot be less than "
            f"the next available id of {next_id}"
        )


class ConfigurationError(UniqueIdGenerationError, ValueError):
    """Raised eagerly when the generator is given an invalid setting."""


class IdSpaceExhaustedError(UniqueIdGenerationError):
    """Raised when a batch would run past the largest 64-bit id."""

    def __init__(self, scope_name: str, first_id_of_next_batch: int) -> None:
        self.scope_name = scope_name
        self.first_id_of_next_batch = first_id_of_next_batch
        super().__init__(
            f"Cannot reserve a batch for scope '{scope_name}': the next batch would "
            f"start at {first_id_of_next_batch}, beyond the 64-bit id range"
        )
