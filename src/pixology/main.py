"""
FastAPI 应用入口
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pixology.api import api_router
from pixology.core import PixologyError, get_logger, get_settings, setup_logging
from pixology.core.exceptions import ValidationError

# 初始化日志
settings = get_settings()
setup_logging(settings.log_level)

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    from pixology.core.database import create_tables
    from pixology.services.image_service import get_image_generation_service

    logger.info("🚀 Pixology API 启动中...")
    create_tables()
    get_image_generation_service().artifact_store.ensure_bucket()
    yield
    logger.info("👋 Pixology API 关闭")


# 创建 FastAPI 应用
app = FastAPI(
    title="Pixology API",
    description="基于 Gemini 的文生图后端服务",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PixologyError)
async def pixology_error_handler(request: Request, exc: PixologyError):
    """业务异常统一返回通用错误信息"""
    logger.warning(
        f"请求失败: {request.method} {request.url.path} -> {exc.status_code} {type(exc).__name__}"
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """参数校验失败返回 400"""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.warning(f"参数校验失败: {request.url.path}, errors={errors}")
    return JSONResponse(
        status_code=ValidationError.status_code,
        content={"detail": ValidationError.default_message, "errors": errors},
    )


# 注册 API 路由
app.include_router(api_router)


@app.get("/")
async def root():
    """健康检查"""
    return {"status": "ok", "message": "Pixology API 运行中"}


@app.get("/health")
async def health():
    """健康检查"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    logger.info(f"启动服务: http://{settings.api_host}:{settings.api_port}")
    uvicorn.run(
        "pixology.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
