import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import BalanceEngineError, ImbalanceError
from app.core.logging import setup_logging
from app.api.v1.routes.group import router as group_router
from app.api.v1.routes.balances import router as balances_router
from app.api.v1.routes.expense import router as expense_router
from app.api.v1.routes.settlements import router as settlements_router

setup_logging()
logger = logging.getLogger("app")

app = FastAPI(title=settings.APP_NAME)

@app.exception_handler(ImbalanceError)
async def imbalance_handler(request: Request, exc: ImbalanceError):
    logger.error("Imbalance on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Balances are inconsistent", "error": exc.code, "currency": exc.currency},
    )

@app.exception_handler(BalanceEngineError)
async def validation_handler(request: Request, exc: BalanceEngineError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc), "error": exc.code})

@app.get("/")
async def root():
    return {"message": f"{settings.APP_NAME} is live"}

app.include_router(group_router, prefix="/api/v1/groups")
app.include_router(balances_router, prefix="/api/v1/groups")
app.include_router(expense_router, prefix="/api/v1/expenses")
app.include_router(settlements_router, prefix="/api/v1/settlements")
