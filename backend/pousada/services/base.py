"""
服务层公共工具
事务边界与金额处理
"""
from contextlib import contextmanager
from decimal import Decimal, ROUND_HALF_UP
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.orm import Session
from pousada.services.errors import StoreUnavailableError, ValidationError

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """金额统一保留两位小数（四舍五入）"""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@contextmanager
def transaction(db: Session):
    """
    事务范围：块内的所有写操作一起提交，任何异常都整体回滚

    数据库不可达或事务失败转换为 StoreUnavailableError，
    唯一约束等冲突转换为 ValidationError
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ValidationError("数据冲突，违反唯一性或引用约束") from e
    except (OperationalError, DBAPIError) as e:
        db.rollback()
        raise StoreUnavailableError("数据库暂不可用，请稍后重试") from e
    except Exception:
        db.rollback()
        raise
