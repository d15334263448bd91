class BalanceEngineError(Exception):
    code = "balance_engine_error"


class SplitValidationError(BalanceEngineError):
    """Caller supplied expense or settlement data that cannot be split."""
    code = "invalid_split"


class InvalidAmountError(SplitValidationError):
    code = "invalid_amount"


class InvalidParticipantsError(SplitValidationError):
    code = "invalid_participants"


class SplitMismatchError(SplitValidationError):
    code = "split_mismatch"

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class CurrencyMismatchError(BalanceEngineError):
    code = "currency_mismatch"


class ImbalanceError(BalanceEngineError):
    """Net balances for a currency do not sum to zero."""
    code = "imbalance"

    def __init__(self, currency: str, residual: int):
        super().__init__(f"Balances for {currency} are off by {residual} minor units")
        self.currency = currency
        self.residual = residual
