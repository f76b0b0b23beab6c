from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from oneclick.core.config import APP_NAME, APP_VERSION, CORS_ORIGINS, SERVER_HOST, SERVER_PORT
from oneclick.db.database import close_database_connection, init_indexes, is_database_configured, test_connection
from oneclick.db.itinerary_store import get_itinerary_store
from oneclick.router.auth import router as auth_router
from oneclick.router.flights import router as flights_router
from oneclick.router.hotels import router as hotels_router
from oneclick.router.places import router as places_router
from oneclick.router.plan import router as plan_router
from oneclick.router.system import router as system_router
from oneclick.router.weather import router as weather_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Test database connection
    print("🚀 Starting up OneClick Planner API...")
    if is_database_configured():
        await test_connection()
        await init_indexes()
    store = get_itinerary_store()
    print(f"🗂️  Itinerary store backend: {store.backend}")
    yield
    # Shutdown: Close database connection
    print("🛑 Shutting down OneClick Planner API...")
    await close_database_connection()


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(system_router)
app.include_router(auth_router)
app.include_router(plan_router)
app.include_router(weather_router)
app.include_router(places_router)
app.include_router(flights_router)
app.include_router(hotels_router)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
