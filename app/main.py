# app/main.py
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.routes import router as api_router
from app.config import CORS_ORIGINS, DATABASE_URL, PORT, SEED_INTERVAL_HOURS, SEED_ON_STARTUP
from app.db import RecordStore
from app.errors import AnalyticsError
from app.scheduler import start_scheduler
from app.services import seed_database
from app.utils import logger


def create_app(store: Optional[RecordStore] = None,
               seed_on_startup: bool = SEED_ON_STARTUP,
               seed_interval_hours: float = SEED_INTERVAL_HOURS) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store = store if store is not None else RecordStore(DATABASE_URL)
        app.state.store.open()
        if seed_on_startup:
            try:
                seed_database(app.state.store)
            except AnalyticsError as e:
                # serve whatever is already stored
                logger.error("Startup seeding failed: %s", e.message)
        scheduler = start_scheduler(app.state.store, seed_interval_hours) if seed_interval_hours > 0 else None
        try:
            yield
        finally:
            if scheduler is not None:
                scheduler.shutdown(wait=False)
            app.state.store.close()

    app = FastAPI(title="Product Transactions API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    @app.exception_handler(AnalyticsError)
    async def analytics_error_handler(request: Request, exc: AnalyticsError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
