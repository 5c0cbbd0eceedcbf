class KonsError(Exception):
    """ Base class for all Kons errors"""
    pass

class KonsInvalidArgument(KonsError, TypeError):
    """ Raised when a reader is constructed over something that is not text"""

class KonsRewindError(KonsError):
    """ Raised when a consumed input cannot be read again from the start"""

class KonsInvalidSymbol(KonsError):
    """ Raised when a binding name is not a symbol"""

class KonsUnboundSymbol(KonsError):
    """ Raised when a symbol is used before it is bound"""

class KonsSyntaxError(KonsError):
    """ Raised by the reader on malformed input; carries the offending token"""

    def __init__(self, message: str, token=None):
        super().__init__(message)
        self.token = token
