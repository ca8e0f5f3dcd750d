from typing import Callable, Dict, Optional, Tuple

from core.errors import (
    BlockNotFound,
    MethodOptNotSupported,
    MethodParamNotSupported,
    ProviderError,
)
from core.utils import to_block_number, to_bytes32
from data.schemas.rpc import RPCRequest

FormatResult = Tuple[Optional[RPCRequest], Optional[ProviderError]]


def _with_params(call: RPCRequest, params: list) -> RPCRequest:
    return call.model_copy(update={"params": params})


def _require_params(call: RPCRequest, name: str, count: int) -> Optional[ProviderError]:
    if len(call.params) < count:
        return MethodParamNotSupported(name, len(call.params) + 1)
    return None


def _check_default_block(
    call: RPCRequest, name: str, position: int
) -> Optional[ProviderError]:
    """
    Only "latest" is accepted as default block, at the 1-based `position`.
    Nothing may follow it.
    """
    params = call.params
    if len(params) > position:
        return MethodParamNotSupported(name, position + 1)
    if len(params) < position:
        return None

    value = params[position - 1]
    if value == "latest":
        return None
    if isinstance(value, str):
        return MethodOptNotSupported(name, "defaultBlock")
    return MethodParamNotSupported(name, position)


def _full_txs_flag(params: list, name: str) -> Tuple[bool, Optional[ProviderError]]:
    if len(params) < 2:
        return False, None
    if not isinstance(params[1], bool):
        return False, MethodParamNotSupported(name, 2)
    return params[1], None


def format_get_block_by_number(call: RPCRequest) -> FormatResult:
    params = list(call.params)
    raw = params[0] if params else "latest"

    try:
        num = to_block_number(raw)
    except ValueError:
        return None, MethodParamNotSupported("getBlockByNumber", 1)
    if num is None:
        return None, BlockNotFound("pending")

    full_txs, err = _full_txs_flag(params, "getBlockByNumber")
    if err:
        return None, err
    return _with_params(call, [num, full_txs]), None


def format_get_block_by_hash(call: RPCRequest) -> FormatResult:
    err = _require_params(call, "getBlockByHash", 1)
    if err:
        return None, err

    params = list(call.params)
    full_txs, err = _full_txs_flag(params, "getBlockByHash")
    if err:
        return None, err
    return _with_params(call, [params[0], full_txs]), None


def format_get_balance(call: RPCRequest) -> FormatResult:
    err = _require_params(call, "getBalance", 1) or _check_default_block(
        call, "getBalance", 2
    )
    if err:
        return None, err
    return call, None


def format_get_code(call: RPCRequest) -> FormatResult:
    err = _require_params(call, "getCode", 1) or _check_default_block(
        call, "getCode", 2
    )
    if err:
        return None, err
    return call, None


def format_get_storage_at(call: RPCRequest) -> FormatResult:
    err = _require_params(call, "getStorageAt", 2) or _check_default_block(
        call, "getStorageAt", 3
    )
    if err:
        return None, err

    params = list(call.params)
    try:
        params[1] = to_bytes32(params[1])
    except ValueError:
        return None, MethodParamNotSupported("getStorageAt", 2)
    return _with_params(call, params), None


def format_transaction_lookup(call: RPCRequest) -> FormatResult:
    # eth_getTransactionByHash -> getTransactionByHash
    err = _require_params(call, call.method[len("eth_"):], 1)
    if err:
        return None, err
    return call, None


INPUT_FORMATTERS: Dict[str, Callable[[RPCRequest], FormatResult]] = {
    "eth_getBlockByNumber": format_get_block_by_number,
    "eth_getBlockByHash": format_get_block_by_hash,
    "eth_getBalance": format_get_balance,
    "eth_getCode": format_get_code,
    "eth_getStorageAt": format_get_storage_at,
    "eth_getTransactionByHash": format_transaction_lookup,
    "eth_getTransactionReceipt": format_transaction_lookup,
}


def format_input(call: RPCRequest) -> FormatResult:
    """Apply the method's formatter; methods without one pass through."""
    formatter = INPUT_FORMATTERS.get(call.method)
    if formatter is None:
        return call, None
    return formatter(call)
