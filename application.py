import os
import logging
from datetime import datetime
from typing import Any

import uvicorn
from fastapi import FastAPI, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from prefill_engine.config import LOG_FORMAT, LOG_LEVEL, Settings
from prefill_engine.main import ADDRESS_REQUIRED_MESSAGE, PropertyReconciliationGraph

# Configure logging
logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)
logger = logging.getLogger("prefill-api")

# Initialize FastAPI app
app = FastAPI(
    title="C-Store Prefill API",
    description="API for pre-filling convenience-store insurance applications from property data",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

settings = Settings.from_env()

# Initialize property reconciliation graph
graph = PropertyReconciliationGraph(settings=settings)
graph.compile()  # Compile the graph once at startup


class PrefillRequest(BaseModel):
    address: Any = None


def reconcile_address(address: str) -> dict:
    """Run the shared compiled graph for one address."""
    return graph.run(address)


@app.post("/api/prefill")
async def prefill(request: PrefillRequest):
    """Reconcile property, places and registry data for a business address."""
    address = request.address
    if not isinstance(address, str) or not address.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": ADDRESS_REQUIRED_MESSAGE},
        )

    address = address.strip()
    try:
        logger.info(f"Processing prefill request: {address}")
        return await run_in_threadpool(reconcile_address, address)
    except Exception as e:
        logger.error(f"Error processing address {address}: {e}")
        logger.exception("Detailed error:")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Internal server error", "error": str(e)},
        )


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "parcel_provider_configured": bool(settings.smarty_auth_id and settings.smarty_auth_token),
        "places_provider_configured": settings.places_enabled,
        "registry_configured": settings.registry_enabled,
    }


@app.on_event("startup")
async def startup_event():
    logger.info("Starting C-Store Prefill API")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down C-Store Prefill API")


if __name__ == "__main__":
    uvicorn.run("application:app", host="0.0.0.0", port=8000, reload=True)
