from typing import Dict, Any, Optional

from core.errors import ProviderError


class ResponseHandler:
    """
    Builds JSON-RPC 2.0 response envelopes.
    The request id is always echoed unchanged.
    """

    JSONRPC_VERSION = "2.0"

    def build_response(self, result: Any, request_id: Any) -> Dict[str, Any]:
        return {
            "jsonrpc": self.JSONRPC_VERSION,
            "id": request_id,
            "result": result,
        }

    def build_error_response(
        self,
        error_message: str,
        request_id: Any = None,
        error_code: int = -32603,
        method: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Error envelope for a failed call. When `method` is given it is
        attached as `error.data.method` so batch callers can tell which
        call failed.
        """
        response = {
            "jsonrpc": self.JSONRPC_VERSION,
            "id": request_id,
            "error": {
                "code": error_code,
                "message": error_message
            }
        }

        if method:
            response["error"]["data"] = {"method": method}

        return response

    def build_exception_response(
        self,
        err: BaseException,
        request_id: Any = None,
        method: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Map any error to an error response. Bridge errors keep their own code,
        Thor client errors are reported as internal errors with their message.
        """
        if isinstance(err, ProviderError):
            return self.build_error_response(err.message, request_id, err.code, method)
        return self.build_error_response(str(err) or err.__class__.__name__, request_id, -32603, method)
