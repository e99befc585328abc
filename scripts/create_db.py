"""
创建数据库表
"""
from pixology.core.database import create_tables, engine

if __name__ == "__main__":
    create_tables()

    print(f"✅ 数据库表创建完成: {engine.url}")
