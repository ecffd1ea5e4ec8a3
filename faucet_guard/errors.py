from __future__ import annotations


class FaucetGuardError(Exception):
    """Base class for errors raised at the input boundary."""


class InvalidMeasurementError(FaucetGuardError, ValueError):
    pass


class UnknownFaucetError(FaucetGuardError, LookupError):
    def __init__(self, faucet_id: str):
        super().__init__(f"Unknown faucet id: {faucet_id!r}")
        self.faucet_id = faucet_id


class DuplicateSampleError(FaucetGuardError, ValueError):
    def __init__(self, sample_id: str):
        super().__init__(f"Sample id already in repository: {sample_id!r}")
        self.sample_id = sample_id
