"""
初始化数据脚本
建表并写入演示营地、房间、员工和预订（已存在时跳过）

在 backend 目录下执行：python init_data.py
演示账号见 app/lodge/seed.py
"""
from app.database import SessionLocal, init_db
from app.lodge.seed import seed_demo_data


def main():
    init_db()
    db = SessionLocal()
    try:
        stats = seed_demo_data(db)
        print(f"演示数据初始化完成: {stats}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
