"""
Pousada 主应用入口
小型旅馆管理系统：房间、客户、预订、消费、库存与报表
"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pousada import __version__
from pousada.config import settings
from pousada.database import init_db
from pousada.routers import (
    dashboard, users, clients, rooms, products, services,
    reservations, product_sales, service_sales, inventory, reports
)
from pousada.services.errors import PousadaError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger("pousada")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 初始化数据库
    init_db()
    logger.info(f"{settings.APP_NAME} started, database: {settings.DATABASE_URL}")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


# 创建应用
app = FastAPI(
    title=f"{settings.APP_NAME} - 旅馆管理系统",
    description="房间、客户、预订、消费、库存与报表管理",
    version=__version__,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """请求日志：请求ID、方法、路径、状态码、耗时"""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"[{request_id}] {request.method} {request.url.path} failed")
        raise
    duration_ms = (time.perf_counter() - start) * 1000

    message = (f"[{request_id}] {request.method} {request.url.path} "
               f"{response.status_code} {duration_ms:.1f}ms")
    if response.status_code >= 500:
        logger.error(message)
    elif response.status_code >= 400:
        logger.warning(message)
    else:
        logger.info(message)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求数据校验失败统一返回 400"""
    errors = jsonable_encoder(exc.errors())
    return JSONResponse(status_code=400, content={"message": "数据无效", "errors": errors})


@app.exception_handler(PousadaError)
async def pousada_error_handler(request: Request, exc: PousadaError):
    """业务错误统一返回 {"message", "errors"}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "errors": jsonable_encoder(exc.errors)}
    )


# 注册路由
for module in (dashboard, users, clients, rooms, products, services,
               reservations, product_sales, service_sales, inventory, reports):
    app.include_router(module.router, prefix="/api")


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": __version__,
        "description": "旅馆管理系统"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}
