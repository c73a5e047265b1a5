from __future__ import annotations


class TokenLedgerError(Exception):
    pass


class InvalidAddressError(TokenLedgerError, ValueError):
    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid address: {address!r}")


class InsufficientBalanceError(TokenLedgerError):
    def __init__(self, *, address: str, attempted_amount: int, available_balance: int) -> None:
        self.address = address
        self.attempted_amount = attempted_amount
        self.available_balance = available_balance
        message = f"Insufficient balance for address={address} attempted={attempted_amount} available={available_balance}"
        super().__init__(message)


class InsufficientAllowanceError(TokenLedgerError):
    def __init__(self, *, owner: str, spender: str, attempted_amount: int, allowance: int) -> None:
        self.owner = owner
        self.spender = spender
        self.attempted_amount = attempted_amount
        self.allowance = allowance
        message = (
            f"Insufficient allowance for owner={owner} spender={spender} "
            f"attempted={attempted_amount} allowance={allowance}"
        )
        super().__init__(message)


class AlreadyInitializedError(TokenLedgerError):
    def __init__(self) -> None:
        super().__init__("Ledger is already initialized")


class NotInitializedError(TokenLedgerError):
    def __init__(self) -> None:
        super().__init__("Ledger has not been initialized")


class UnauthorizedError(TokenLedgerError):
    def __init__(self, *, caller: str, required_role: str) -> None:
        self.caller = caller
        self.required_role = required_role
        super().__init__(f"Caller {caller} lacks the {required_role} role")


class LedgerPausedError(TokenLedgerError):
    def __init__(self) -> None:
        super().__init__("Transfers are paused")
