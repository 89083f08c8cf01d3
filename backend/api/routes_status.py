"""
Factory status routes.

One read-only endpoint that returns the consolidated snapshot. Individual
record-set faults never reach this layer (they degrade to empty data);
anything raised here is an assembly fault and becomes a single 500.
"""

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from config import settings
from models.snapshot import SnapshotConfig
from services.snapshot_assembler import generate_snapshot
from services.source_gateway import source_gateway
from utils.logger import api_logger as logger

router = APIRouter(tags=["Factory Status"])


def _cache_headers() -> dict[str, str]:
    return {"Cache-Control": f"public, max-age={settings.SNAPSHOT_CACHE_MAX_AGE_SECONDS}"}


@router.options("/factory-status")
async def factory_status_preflight():
    # Browser preflights (Origin + Access-Control-Request-Method) are answered
    # by CORSMiddleware before routing; this covers bare OPTIONS requests.
    return Response(status_code=204, headers=_cache_headers())


@router.get("/factory-status")
async def get_factory_status():
    try:
        snapshot = await generate_snapshot(
            source_gateway, SnapshotConfig.from_settings(settings)
        )
        return JSONResponse(
            content=snapshot.model_dump(mode="json"), headers=_cache_headers()
        )
    except Exception as exc:
        logger.exception("Factory status error", error=str(exc))
        return JSONResponse(
            status_code=500, content={"error": str(exc)}, headers=_cache_headers()
        )
