#!/usr/bin/env python3
"""
Unit tests for the bridge error taxonomy.
"""

import pytest

from core.errors import (
    BlockNotFound,
    MethodNotFound,
    MethodOptNotSupported,
    MethodParamNotSupported,
    ProviderError,
    TransactionNotFound,
)


@pytest.mark.parametrize("err, code, fragment", [
    (MethodNotFound("eth_call"), -32601, "eth_call"),
    (MethodParamNotSupported("getBalance", 2), -32602, "#2"),
    (MethodOptNotSupported("getCode", "defaultBlock"), -32602, "defaultBlock"),
    (BlockNotFound("pending"), -32000, "pending"),
    (BlockNotFound(4294967295), -32000, "4294967295"),
    (TransactionNotFound("0xabc"), -32000, "0xabc"),
])
def test_codes_and_messages(err, code, fragment):
    assert isinstance(err, ProviderError)
    assert err.code == code
    assert fragment in err.message
    assert err.to_dict() == {"code": code, "message": err.message}
    assert str(err) == err.message


def test_same_identifier_same_message():
    assert BlockNotFound("0x00").message == BlockNotFound("0x00").message


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
