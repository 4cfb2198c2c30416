"""
Survey Admin Platform - FastAPI Backend
主应用入口
"""
import os
import sys
import time
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from app import config
from app.api import questions, survey_responses, stats
from app.storage import questions_store, survey_response_store
from app.utils.timestamps import utc_iso_now

# 配置日志
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)

# 框架自身抛出的404/405（未匹配路由）
ROUTE_NOT_FOUND_DETAILS = {'Not Found', 'Method Not Allowed'}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """启动时检查数据文件"""
    logger.info("题目文件: %s", questions_store.filepath)
    logger.info("提交记录文件: %s", survey_response_store.filepath)
    if questions_store.exists():
        logger.info("题目文件已存在")
    else:
        logger.warning("题目文件不存在, 首次保存时创建")
    if survey_response_store.exists():
        logger.info("提交记录文件已存在")
    else:
        logger.warning("提交记录文件不存在, 首次提交时创建")
    yield


app = FastAPI(
    title="Survey Admin API",
    description="问卷题目与提交记录管理服务",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan
)

# CORS配置 - 允许管理端和问卷页面访问
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """记录每个请求的方法、路径、状态码和耗时"""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# 注册API路由
app.include_router(questions.router, prefix="/api", tags=["问卷题目管理"])
app.include_router(survey_responses.router, prefix="/api", tags=["问卷提交记录"])
app.include_router(stats.router, prefix="/api", tags=["问卷统计"])


def list_api_routes() -> List[str]:
    """列出所有已注册的路由（含状态页 /），格式为 'METHOD /path'；文档页不是 APIRoute，不在其中"""
    routes = []
    for route in app.routes:
        if isinstance(route, APIRoute):
            for method in sorted(route.methods):
                routes.append(f"{method} {route.path}")
    return routes


# ========== 异常处理 ==========

@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """统一错误格式 {"error": ...}；未匹配的路由返回诊断信息"""
    if exc.status_code in (404, 405) and exc.detail in ROUTE_NOT_FOUND_DETAILS:
        url = request.url.path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        logger.warning("404 - Route not found: %s %s", request.method, url)
        return JSONResponse(
            status_code=404,
            content={
                'error': 'Route not found',
                'method': request.method,
                'url': url,
                'availableRoutes': list_api_routes(),
            }
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={'error': exc.detail},
        headers=getattr(exc, 'headers', None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求体/路径参数格式错误统一返回400"""
    logger.warning("请求格式错误: %s %s errors=%s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={'error': 'Invalid request format'})


# ========== 服务状态 ==========

@app.get("/", response_class=HTMLResponse)
async def root():
    """服务状态页"""
    return f"""
        <h1>Survey Server is Running!</h1>
        <p>Server time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}</p>
        <p><a href="/admin.html">Admin Panel</a></p>
        <p><a href="/api/test">Test API</a></p>
    """


@app.get("/api/test")
async def api_test():
    """API连通性测试"""
    return {
        'message': 'API is working!',
        'timestamp': utc_iso_now(),
        'endpoints': list_api_routes(),
    }


# 管理端静态页面，必须在所有路由之后挂载
if config.STATIC_DIR and os.path.isdir(config.STATIC_DIR):
    app.mount("/", StaticFiles(directory=config.STATIC_DIR, html=True), name="static")
    logger.info("静态文件目录: %s", config.STATIC_DIR)


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower()
    )
