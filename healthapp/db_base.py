"""统一的 SQLAlchemy 声明式基类，所有 ORM 模型都继承自这里的 Base。"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
