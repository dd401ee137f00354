"""
数据库配置 - 持久化层
默认使用 SQLite，可通过 DATABASE_URL 切换到任意 SQLAlchemy 支持的数据库
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from pousada.config import settings

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite(SQLALCHEMY_DATABASE_URL) else {}
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """依赖注入：获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """初始化数据库表"""
    from pousada.models import ontology  # noqa
    Base.metadata.create_all(bind=engine)

    if _is_sqlite(SQLALCHEMY_DATABASE_URL):
        # 启用 WAL 模式以提高并发性能
        with engine.connect() as conn:
            conn.execute(text("PRAGMA journal_mode=WAL"))
            conn.execute(text("PRAGMA synchronous=NORMAL"))
            conn.commit()
