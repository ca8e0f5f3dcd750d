import math
import time
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Mapping, Union

from core.errors import BlockNotFound, MethodNotFound, TransactionNotFound
from core.utils import hex_to_number
from data.schemas.rpc import RPCRequest
from services.input_formatter import format_input
from services.output_formatter import to_ret_block, to_ret_receipt, to_ret_transaction
from services.response_handler import ResponseHandler

# Assumed average block interval used to estimate the chain height while syncing
BLOCK_INTERVAL_MS = 10_000

Callback = Callable[..., Any]
MethodHandler = Callable[[RPCRequest], Awaitable[Any]]


class ConnexProvider:
    """
    Serves a fixed set of Ethereum JSON-RPC methods from a Thor node.

    Each call is looked up in a method map built once at construction,
    its params are validated by the input formatter, then the handler
    queries the Thor client and reshapes the answer into the Ethereum
    result shape.

    The only instance state is the Thor client and the chain tag derived
    from the genesis id, so concurrent calls need no locking.
    """

    SUPPORTED_METHODS = (
        "eth_getBlockByHash",
        "eth_getBlockByNumber",
        "eth_chainId",
        "eth_getTransactionByHash",
        "eth_getBalance",
        "eth_blockNumber",
        "eth_getCode",
        "eth_syncing",
        "eth_getTransactionReceipt",
        "eth_getStorageAt",
    )

    def __init__(self, thor):
        """
        Args:
            thor: Started Thor client (see infra.thor_client.ThorClient);
                  its genesis descriptor must already be loaded.
        """
        self.thor = thor
        self.response_handler = ResponseHandler()

        genesis_id = thor.genesis["id"]
        self._chain_tag = hex_to_number("0x" + genesis_id[-2:])

        self._method_map: Mapping[str, MethodHandler] = MappingProxyType({
            "eth_getBlockByHash": self._get_block_by_hash,
            "eth_getBlockByNumber": self._get_block_by_number,
            "eth_chainId": self._get_chain_id,
            "eth_getTransactionByHash": self._get_transaction_by_hash,
            "eth_getBalance": self._get_balance,
            "eth_blockNumber": self._get_block_number,
            "eth_getCode": self._get_code,
            "eth_syncing": self._is_syncing,
            "eth_getTransactionReceipt": self._get_transaction_receipt,
            "eth_getStorageAt": self._get_storage_at,
        })

        print(f"[ConnexProvider] Chain tag {self._chain_tag} (genesis {genesis_id})")

    @property
    def chain_tag(self) -> int:
        return self._chain_tag

    @property
    def method_map(self) -> Mapping[str, MethodHandler]:
        return self._method_map

    async def send(self, payload: Union[RPCRequest, Dict[str, Any]]) -> Dict[str, Any]:
        """
        Serve one call and return its response envelope.

        Raises:
            MethodNotFound: method is not in the supported set
            ProviderError: params rejected, block/transaction not found
            Exception: any Thor client error, unchanged
        """
        call = payload if isinstance(payload, RPCRequest) else RPCRequest.model_validate(payload)

        handler = self._method_map.get(call.method)
        if handler is None:
            print(f"[ConnexProvider] Unsupported method: {call.method}")
            raise MethodNotFound(call.method)

        call, err = format_input(call)
        if err is not None:
            raise err

        result = await handler(call)
        return self.response_handler.build_response(result, call.id)

    async def send_async(
        self, payload: Union[RPCRequest, Dict[str, Any]], callback: Callback
    ) -> None:
        """
        Callback flavour of `send`: `callback(err)` on failure,
        `callback(None, response)` on success, exactly once.
        """
        try:
            response = await self.send(payload)
        except Exception as err:
            callback(err)
        else:
            callback(None, response)

    # ------------------------------------------------------------------
    # Handlers. Params have already been through the input formatter.

    async def _get_block_by_hash(self, call: RPCRequest):
        block_hash, full_txs = call.params[0], call.params[1]
        blk = await self.thor.get_block(block_hash, expanded=full_txs)
        if not blk:
            raise BlockNotFound(block_hash)
        return to_ret_block(blk)

    async def _get_block_by_number(self, call: RPCRequest):
        num, full_txs = call.params[0], call.params[1]
        blk = await self.thor.get_block(num, expanded=full_txs)
        if not blk:
            raise BlockNotFound(num)
        return to_ret_block(blk)

    async def _get_block_number(self, call: RPCRequest):
        blk = await self.thor.get_block("latest")
        if not blk:
            raise BlockNotFound("latest")
        return blk["number"]

    async def _get_chain_id(self, call: RPCRequest):
        return self._chain_tag

    async def _get_transaction_by_hash(self, call: RPCRequest):
        tx_hash = call.params[0]
        tx = await self.thor.get_transaction(tx_hash)
        if not tx:
            raise TransactionNotFound(tx_hash)
        return to_ret_transaction(tx)

    async def _get_transaction_receipt(self, call: RPCRequest):
        receipt = await self.thor.get_receipt(call.params[0])
        if not receipt:
            # not mined yet is a valid answer, not an error
            return None
        return to_ret_receipt(receipt)

    async def _get_balance(self, call: RPCRequest):
        acc = await self.thor.get_account(call.params[0])
        return acc["balance"]

    async def _get_code(self, call: RPCRequest):
        code = await self.thor.get_code(call.params[0])
        return code["code"]

    async def _get_storage_at(self, call: RPCRequest):
        storage = await self.thor.get_storage(call.params[0], call.params[1])
        return storage["value"]

    async def _is_syncing(self, call: RPCRequest):
        status = self.thor.status
        if status["progress"] == 1:
            return False

        now_ms = time.time() * 1000
        genesis_ms = self.thor.genesis["timestamp"] * 1000
        head = status["head"]
        return {
            "currentBlock": head["number"] if head else 0,
            "highestBlock": math.floor((now_ms - genesis_ms) / BLOCK_INTERVAL_MS),
            "head": head,
        }
