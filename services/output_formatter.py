from typing import Any, Dict, List, Optional

from core.utils import number_to_hex

ZERO_BYTES32 = "0x" + "0" * 64
ZERO_NONCE = "0x" + "0" * 16
ZERO_BLOOM = "0x" + "0" * 512


def to_ret_block(block: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a Thor block into the shape web3 expects.

    Thor fields are kept as-is; Ethereum names are added as aliases so that
    `hash == id` and `parentHash == parentID`. Block number, timestamp and
    size stay ints; gas values become hex strings.

    Transactions are ids unless the block was fetched expanded, in which case
    each one is converted with `to_ret_transaction`.
    """
    ret = dict(block)

    transactions = []
    for index, tx in enumerate(block.get("transactions") or []):
        if isinstance(tx, dict):
            transactions.append(to_ret_transaction(tx, block=block, index=index))
        else:
            transactions.append(tx)

    ret.update({
        "hash": block["id"],
        "parentHash": block["parentID"],
        "miner": block.get("beneficiary"),
        "transactionsRoot": block.get("txsRoot"),
        "gasLimit": number_to_hex(block.get("gasLimit")),
        "gasUsed": number_to_hex(block.get("gasUsed")),
        "totalDifficulty": number_to_hex(block.get("totalScore", 0)),
        "difficulty": "0x0",
        "sha3Uncles": ZERO_BYTES32,
        "logsBloom": ZERO_BLOOM,
        "extraData": "0x",
        "nonce": ZERO_NONCE,
        "uncles": [],
        "transactions": transactions,
    })
    return ret


def to_ret_transaction(
    tx: Dict[str, Any],
    block: Optional[Dict[str, Any]] = None,
    index: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Flatten a Thor transaction.

    A single clause is lifted to top-level to/value/input. Multi-clause
    transactions leave those as None; `clauses` is always returned.
    """
    meta = tx.get("meta") or {}
    clauses: List[Dict[str, Any]] = tx.get("clauses") or []

    if len(clauses) == 1:
        clause = clauses[0]
        to, value, data = clause.get("to"), number_to_hex(clause.get("value")), clause.get("data")
    else:
        to, value, data = None, None, None

    if block is not None:
        block_hash, block_number = block.get("id"), block.get("number")
    else:
        block_hash, block_number = meta.get("blockID"), meta.get("blockNumber")

    return {
        "hash": tx["id"],
        "blockHash": block_hash,
        "blockNumber": block_number,
        "transactionIndex": index,
        "from": tx.get("origin"),
        "to": to,
        "value": value,
        "input": data,
        "gas": number_to_hex(tx.get("gas")),
        "gasPrice": number_to_hex(tx.get("gasPriceCoef", 0)),
        "nonce": tx.get("nonce"),
        # Thor specific
        "chainTag": tx.get("chainTag"),
        "blockRef": tx.get("blockRef"),
        "expiration": tx.get("expiration"),
        "dependsOn": tx.get("dependsOn"),
        "delegator": tx.get("delegator"),
        "clauses": [dict(c) for c in clauses],
    }


def _to_ret_log(
    event: Dict[str, Any], meta: Dict[str, Any], log_index: int
) -> Dict[str, Any]:
    return {
        "address": event.get("address"),
        "topics": list(event.get("topics") or []),
        "data": event.get("data"),
        "blockHash": meta.get("blockID"),
        "blockNumber": meta.get("blockNumber"),
        "transactionHash": meta.get("txID"),
        "logIndex": log_index,
        "removed": False,
    }


def to_ret_receipt(receipt: Dict[str, Any]) -> Dict[str, Any]:
    meta = receipt.get("meta") or {}
    outputs: List[Dict[str, Any]] = receipt.get("outputs") or []
    reverted = bool(receipt.get("reverted"))

    contract_address = None
    logs: List[Dict[str, Any]] = []
    if len(outputs) == 1:
        output = outputs[0]
        contract_address = output.get("contractAddress")
        logs = [
            _to_ret_log(event, meta, i)
            for i, event in enumerate(output.get("events") or [])
        ]

    gas_used = number_to_hex(receipt.get("gasUsed"))
    return {
        "transactionHash": meta.get("txID"),
        "blockHash": meta.get("blockID"),
        "blockNumber": meta.get("blockNumber"),
        "from": meta.get("txOrigin"),
        "gasUsed": gas_used,
        "cumulativeGasUsed": gas_used,
        "status": "0x0" if reverted else "0x1",
        "contractAddress": contract_address,
        "logs": logs,
        "logsBloom": ZERO_BLOOM,
        # Thor specific
        "gasPayer": receipt.get("gasPayer"),
        "paid": receipt.get("paid"),
        "reward": receipt.get("reward"),
        "reverted": reverted,
        "outputs": [dict(o) for o in outputs],
    }
