import asyncio
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from data.schemas.rpc import RPCRequest
from services.response_handler import ResponseHandler

router = APIRouter()


provider = None
response_handler = ResponseHandler()


def init_routes(provider_instance):
    global provider
    provider = provider_instance


async def serve_call(payload: Any) -> Dict[str, Any]:
    """Serve a single JSON-RPC call, always returning an envelope."""
    request_id = payload.get("id") if isinstance(payload, dict) else None

    try:
        call = RPCRequest.model_validate(payload)
    except ValidationError as e:
        return response_handler.build_error_response(
            error_message=f"Invalid Request: {e.errors()[0]['msg']}",
            request_id=request_id,
            error_code=-32600,
        )

    try:
        return await provider.send(call)
    except Exception as e:
        return response_handler.build_exception_response(e, call.id)


@router.post("/rpc")
async def rpc(request: Request):
    if provider is None:
        return JSONResponse(
            response_handler.build_error_response("Bridge not connected", error_code=-32000),
            status_code=503,
        )

    try:
        payload = await request.json()
    except ValueError:
        return JSONResponse(
            response_handler.build_error_response("Parse error", error_code=-32700)
        )

    if isinstance(payload, list):
        if not payload:
            return JSONResponse(
                response_handler.build_error_response("Invalid Request: empty batch", error_code=-32600)
            )
        # batch calls are independent, answers keep request order
        results = await asyncio.gather(*(serve_call(p) for p in payload))
        return JSONResponse(list(results))

    return JSONResponse(await serve_call(payload))


@router.get("/status")
async def status():
    if provider is None:
        return JSONResponse({"error": "Bridge not connected"}, status_code=503)

    thor = provider.thor
    head = thor.status.get("head") or {}
    return JSONResponse({
        "chain_tag": provider.chain_tag,
        "genesis_id": thor.genesis["id"],
        "progress": thor.status.get("progress"),
        "head_number": head.get("number"),
        "supported_methods": list(provider.SUPPORTED_METHODS),
    })
