from pydantic import BaseModel, Field
from typing import List, Any, Union


class RPCRequest(BaseModel):
    jsonrpc: str = "2.0"
    method: str = Field(min_length=1)
    params: List[Any] = []
    id: Union[int, str] = 0
