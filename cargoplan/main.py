import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from fastapi.middleware.cors import CORSMiddleware

from cargoplan.config import get_settings
from cargoplan.database import engine, Base
from cargoplan.exceptions import register_exception_handlers
from cargoplan import models  # registers tables on Base.metadata

# Import Routers
from cargoplan.routers import user, plan, request as request_router, dashboard

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Initialize DB
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_HOST, "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# =================================================================
# REGISTER API ROUTERS
# =================================================================
app.include_router(user.router)
app.include_router(plan.router)
app.include_router(request_router.router)
app.include_router(dashboard.router)

# Page Routes (SPA)
@app.get("/", response_class=HTMLResponse)
async def root(request: Request):
    return templates.TemplateResponse(request, "login.html", {"app_name": settings.APP_NAME})

@app.get("/dashboard", response_class=HTMLResponse)
async def spa_shell(request: Request):
    return templates.TemplateResponse(request, "index.html", {"app_name": settings.APP_NAME})
