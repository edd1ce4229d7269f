"""Health check endpoints for debugging and monitoring."""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from keywarden.api.core.dependencies import AsyncSessionDep
from keywarden.modules.health.service import HealthService, OverallHealthStatus

# Create separate routers for root and health endpoints
root_router = APIRouter()
router = APIRouter(prefix="/health", tags=["health"])


@root_router.get("/")
async def root():
    """Root endpoint with minimal HTML landing page."""
    html_content = """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <meta charset="UTF-8">
        <title>Keywarden</title>
        <style>
            body {
                font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
                background: #f8f9fa;
                color: #1a1a1a;
                text-align: center;
                padding: 4rem 2rem;
            }
            a { color: #1a1a1a; margin: 0 1rem; }
        </style>
    </head>
    <body>
        <h1>Keywarden</h1>
        <p>Credential issuance and validation service.</p>
        <p><a href="/docs">API docs</a><a href="/health">Health</a></p>
    </body>
    </html>
    """
    return HTMLResponse(content=html_content, media_type="text/html")


@router.get("")
async def health_check(db: AsyncSessionDep) -> OverallHealthStatus:
    """Health check for the credential store."""
    health_service = HealthService(db)
    return await health_service.run_all_checks()


@router.get("/liveness")
async def liveness_check():
    """Simple liveness check - indicates if service is running."""
    return {"status": "alive", "service": "keywarden"}
