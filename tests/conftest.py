"""
Shared fixtures: Thor-shaped sample data and a mocked Thor client.
"""

import pytest
from unittest.mock import MagicMock, AsyncMock

from core.provider import ConnexProvider

# mainnet genesis, chain tag 0x4a
GENESIS_ID = "0x00000000851caf3cfdb6e899cf5958bfb1ac3413d346d43539627e6be7ec1b4a"
GENESIS_TIMESTAMP = 1530316800

BLOCK_ID = "0x00af11f1090c43dcb9e23f3acd04fb9271ac08df0e1303711a851c03a960d571"
PARENT_ID = "0x00af11f0b1d9ff2e5c5b3d6fa6c0d0ae1d4a5e0a1c25e3f0d1e2b4a8c6f0a1b2"
TX_ID = "0x2b8b4f5e4f3a8ad6e2c9a39e9d2e3d6b0a3c54b0b7d6d4d8c4a5e3b8f9c0d1e2"
ORIGIN = "0x7567d83b7b8d80addcb281a71d54fc7b3364ffed"
RECIPIENT = "0xd3ef28df6b553ed2fc47259e8134319cb1121a2a"


@pytest.fixture
def genesis():
    return {
        "id": GENESIS_ID,
        "number": 0,
        "size": 170,
        "parentID": "0xffffffff53616c757465202620526573706563742c20457468657265756d2100",
        "timestamp": GENESIS_TIMESTAMP,
        "gasLimit": 10000000,
        "beneficiary": "0x0000000000000000000000000000000000000000",
        "gasUsed": 0,
        "totalScore": 0,
        "txsRoot": "0x45b0cfc220ceec5b7c1c62c4d4193d38e4eba48e8815729ce75f9c0ab0e4c1c0",
        "stateRoot": "0x09bfdf9e24dd5cd5b63f3c1b5d58b97ff02ca0490214a021ed7d99b93867839c",
        "receiptsRoot": "0x45b0cfc220ceec5b7c1c62c4d4193d38e4eba48e8815729ce75f9c0ab0e4c1c0",
        "signer": "0x0000000000000000000000000000000000000000",
        "isTrunk": True,
        "transactions": [],
    }


@pytest.fixture
def block():
    return {
        "id": BLOCK_ID,
        "number": 11473393,
        "size": 361,
        "parentID": PARENT_ID,
        "timestamp": 1645069300,
        "gasLimit": 30000000,
        "beneficiary": "0xb4094c25f86d628fdd571afc4077f0d0196afb48",
        "gasUsed": 21000,
        "totalScore": 1110847829,
        "txsRoot": "0x1a9e2a8c4f1c5b4d3e2f1a0b9c8d7e6f5a4b3c2d1e0f9a8b7c6d5e4f3a2b1c0d",
        "txsFeatures": 1,
        "stateRoot": "0x3e5f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0c1d2e3f4a5b6c7d8e9f0a1b2c3d4e5f",
        "receiptsRoot": "0x4f6a7b8c9d0e1f2a3b4c5d6e7f8a9b0c1d2e3f4a5b6c7d8e9f0a1b2c3d4e5f6a",
        "signer": "0x6f4a8f2d7b2ea9a3b1c0d3e2f1a0b9c8d7e6f5a4",
        "isTrunk": True,
        "transactions": [TX_ID],
    }


@pytest.fixture
def transaction():
    return {
        "id": TX_ID,
        "chainTag": 74,
        "blockRef": "0x00af11f0b1d9ff2e",
        "expiration": 720,
        "clauses": [
            {"to": RECIPIENT, "value": "0xde0b6b3a7640000", "data": "0x"}
        ],
        "gasPriceCoef": 0,
        "gas": 21000,
        "origin": ORIGIN,
        "delegator": None,
        "nonce": "0x1b2c3d4e5f",
        "dependsOn": None,
        "size": 130,
        "meta": {
            "blockID": BLOCK_ID,
            "blockNumber": 11473393,
            "blockTimestamp": 1645069300,
        },
    }


@pytest.fixture
def receipt():
    return {
        "gasUsed": 21000,
        "gasPayer": ORIGIN,
        "paid": "0x1236efcbcbb340000",
        "reward": "0x576e189f04f60000",
        "reverted": False,
        "meta": {
            "blockID": BLOCK_ID,
            "blockNumber": 11473393,
            "blockTimestamp": 1645069300,
            "txID": TX_ID,
            "txOrigin": ORIGIN,
        },
        "outputs": [
            {
                "contractAddress": None,
                "events": [],
                "transfers": [
                    {"sender": ORIGIN, "recipient": RECIPIENT, "amount": "0xde0b6b3a7640000"}
                ],
            }
        ],
    }


@pytest.fixture
def thor(genesis, block, transaction, receipt):
    """Thor client double with every lookup answering successfully."""
    client = MagicMock()
    client.genesis = genesis
    client.status = {
        "progress": 1.0,
        "head": {
            "id": block["id"],
            "number": block["number"],
            "timestamp": block["timestamp"],
            "parentID": block["parentID"],
            "txsFeatures": 1,
            "gasLimit": block["gasLimit"],
        },
    }
    client.get_block = AsyncMock(return_value=block)
    client.get_transaction = AsyncMock(return_value=transaction)
    client.get_receipt = AsyncMock(return_value=receipt)
    client.get_account = AsyncMock(
        return_value={"balance": "0x47ff1f90327aa0f8e", "energy": "0x1", "hasCode": False}
    )
    client.get_code = AsyncMock(return_value={"code": "0x6080604052"})
    client.get_storage = AsyncMock(
        return_value={"value": "0x000000000000000000000000000000000000000000000000000000000000002a"}
    )
    return client


@pytest.fixture
def provider(thor):
    return ConnexProvider(thor)


class CallbackRecorder:
    """Records every invocation of a (err, result) callback."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)

    @property
    def error(self):
        return self.calls[0][0]

    @property
    def response(self):
        return self.calls[0][1]


@pytest.fixture
def callback():
    return CallbackRecorder()
