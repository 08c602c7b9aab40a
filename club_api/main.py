"""Club portal reminder API.

Hosts the task reminder subsystem for the portal: request handlers schedule
reminders and send assignment notices, the lifespan runs the periodic
sweep and cleanup jobs.

Run with: uvicorn club_api.main:app --port 8100
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI

from domains.tasks import ReminderServices, build_reminder_services
from jobs.task_reminders import TaskReminderProcessor
from logger import logger
from .task_routes import router as task_router


def create_app(services: Optional[ReminderServices] = None, start_processor: bool = True) -> FastAPI:
    """Build the API.

    Args:
        services: Pre-built reminder services (default: built from config at startup)
        start_processor: Run the periodic sweep/cleanup jobs during the app lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.reminder_services = services or build_reminder_services()
        processor = None
        if start_processor:
            processor = TaskReminderProcessor(app.state.reminder_services)
            processor.start()
        app.state.reminder_processor = processor

        try:
            yield
        finally:
            if processor is not None:
                processor.stop()
            if services is None:
                app.state.reminder_services.close()
            logger.info("Club portal reminder API stopped")

    app = FastAPI(
        title="Club Portal Reminders",
        description="Task reminder scheduling and delivery for the club portal",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ============================================================
    # Health Check
    # ============================================================

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        processor = getattr(app.state, "reminder_processor", None)
        return {
            "status": "ok",
            "service": "Club Portal Reminders",
            "processor_running": bool(processor and processor.running),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    app.include_router(task_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8100)
