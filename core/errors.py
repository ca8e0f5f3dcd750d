from typing import Any, Union


class ProviderError(Exception):
    """
    Base class for every error the bridge raises on its own.

    Carries a JSON-RPC error code so the HTTP layer can build the error
    object without knowing the concrete kind. Errors raised by the Thor
    client are NOT wrapped into this hierarchy.
    """

    code = -32603

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}

    def __repr__(self):
        return f"{self.__class__.__name__}({self.message!r})"


class MethodNotFound(ProviderError):
    code = -32601

    def __init__(self, method: str):
        super().__init__(f"Method not found: {method}")
        self.method = method


class MethodParamNotSupported(ProviderError):
    code = -32602

    def __init__(self, method: str, index: int):
        super().__init__(f"Parameter #{index} of method {method} not supported")
        self.method = method
        self.index = index


class MethodOptNotSupported(ProviderError):
    code = -32602

    def __init__(self, method: str, opt: str):
        super().__init__(f"Option {opt} of method {method} not supported")
        self.method = method
        self.opt = opt


class BlockNotFound(ProviderError):
    code = -32000

    def __init__(self, identifier: Union[str, int]):
        super().__init__(f"Block not found: {identifier}")
        self.identifier = identifier


class TransactionNotFound(ProviderError):
    code = -32000

    def __init__(self, tx_hash: Any):
        super().__init__(f"Transaction not found: {tx_hash}")
        self.hash = tx_hash
