from __future__ import annotations
import logging
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from app.errors import ClientInputError, UpstreamError
from app.services.pump_fun import PumpFunClient, pump_fun_client
from app.services.solana_tracker import SolanaTrackerClient, solana_tracker_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proxy", tags=["proxy"])


def get_pump_fun_client() -> PumpFunClient:
    return pump_fun_client


def get_solana_tracker_client() -> SolanaTrackerClient:
    return solana_tracker_client


def require_identifier(id: Optional[str], mint: Optional[str]) -> str:
    # `mint` is the parameter name older front ends still send
    value = (id or mint or "").strip()
    if not value:
        raise ClientInputError("id parameter is required")
    return value


@router.get("/metadata")
async def token_metadata(
    id: Optional[str] = Query(None),
    mint: Optional[str] = Query(None),
    client: PumpFunClient = Depends(get_pump_fun_client),
):
    token_id = require_identifier(id, mint)
    try:
        data = await client.get_coin(token_id)
    except UpstreamError as e:
        logger.warning(f"pump.fun coin fetch failed for {token_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch token metadata")

    # Only the two fields the explorer renders; the rest of the payload is dropped
    return {
        "image": data.get("image_uri"),
        "marketCap": data.get("usd_market_cap"),
    }


@router.get("/all-time-high")
async def token_all_time_high(
    id: Optional[str] = Query(None),
    mint: Optional[str] = Query(None),
    client: SolanaTrackerClient = Depends(get_solana_tracker_client),
):
    token_id = require_identifier(id, mint)
    try:
        return await client.get_ath(token_id)
    except UpstreamError as e:
        logger.warning(f"Solana Tracker ATH fetch failed for {token_id}: {e}")
        raise HTTPException(status_code=502, detail="Failed to fetch all-time-high data")
