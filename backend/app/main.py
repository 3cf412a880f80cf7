"""
Lodge Admin 主应用入口
多营地住宿预订管理后台
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import init_db, SessionLocal
from app.routers import auth
from app.lodge.routers import get_lodge_routers

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    # 初始化数据库
    init_db()

    if settings.SEED_DEMO_DATA:
        from app.lodge.seed import seed_demo_data
        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()

    logger.info(f"{settings.APP_NAME} started")
    yield


# 创建应用
app = FastAPI(
    title="Lodge Admin - 营地预订管理系统",
    description="多营地住宿预订、房间库存与员工权限管理",
    version="1.0.0",
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应限制具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(auth.router)
for router in get_lodge_routers():
    app.include_router(router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "description": "多营地住宿预订管理后台"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}
