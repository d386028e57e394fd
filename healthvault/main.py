from pathlib import Path

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from healthvault.api import records
from healthvault.core import config
from healthvault.core.database import engine, SessionLocal, get_db
from healthvault.core.errors import RecordError, StoreError
from healthvault.core.repository import RecordRepository
from healthvault.core.seed import init_db

APP_DIR = Path(__file__).resolve().parent

app = FastAPI(title="HealthVault")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(records.router)

app.mount("/static", StaticFiles(directory=APP_DIR / "static"), name="static")

templates = Jinja2Templates(directory=APP_DIR / "templates")


@app.exception_handler(RecordError)
async def record_error_handler(request: Request, exc: RecordError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and path params are a 400 like any other validation failure"""
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=400, content={"error": "Invalid request"})

    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = f"Invalid {location}: {first.get('msg')}" if location else f"Invalid request: {first.get('msg')}"
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/", response_class=HTMLResponse)
def index(request: Request):
    """Single page UI - home, history and about sections"""
    return templates.TemplateResponse(request, "index.html", {})


@app.get("/health")
def health(db: Session = Depends(get_db)):
    backend = db.get_bind().url.get_backend_name()
    try:
        RecordRepository(db).ping()
    except StoreError as e:
        return JSONResponse(
            status_code=500,
            content={
                "status": "error",
                "database": "disconnected",
                "backend": backend,
                "error": f"{e.message}: {type(e.__cause__).__name__}",
            },
        )
    return {"status": "ok", "database": "connected", "backend": backend}


@app.on_event("startup")
def startup():
    init_db(engine, SessionLocal, seed=config.SEED_SAMPLE_DATA)


def run():
    import uvicorn

    print(f"[SERVER] http://localhost:{config.PORT} (API at /records)")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)


if __name__ == "__main__":
    run()
