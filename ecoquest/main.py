import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes.activities import router as activities_router
from .routes.calc import router as calc_router
from .routes.garden import router as garden_router
from .routes.insights import router as insights_router
from .routes.leaderboard import router as leaderboard_router
from .routes.recommendations import router as recommendations_router
from .settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="EcoQuest Carbon Tracker",
    version="0.3.0",
    description="Logs eco-friendly activities, scores their carbon footprint and rewards points.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok", "service": "ecoquest-api"}


app.include_router(calc_router)
app.include_router(activities_router)
app.include_router(insights_router)
app.include_router(garden_router)
app.include_router(leaderboard_router)
app.include_router(recommendations_router)
