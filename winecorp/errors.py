"""Exceptions métier du moteur WineCorp."""


class WinecorpError(Exception):
    """Erreur de base pour les refus métier."""


class InsufficientFundsError(WinecorpError):
    pass


class BoardRejectionError(WinecorpError):
    """Le conseil d'administration bloque l'opération."""

    def __init__(self, message: str, limit: float = None):
        super().__init__(message)
        self.limit = limit


class LoanError(WinecorpError):
    pass


class ShareOperationError(WinecorpError):
    pass
