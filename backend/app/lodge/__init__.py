"""
app/lodge/__init__.py

营地领域：营地/房间库存、预订生命周期、员工与数据作用域
"""
