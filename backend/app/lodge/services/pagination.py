"""
列表分页
"""
import math
from typing import Any, Dict, List, Sequence, Tuple


def paginate(items: Sequence[Any], page: int, page_size: int) -> Tuple[List[Any], Dict[str, int]]:
    """按页切片，page 从 1 开始；越界页返回空列表"""
    page = max(page or 1, 1)
    total = len(items)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), {
        "current_page": page,
        "total_pages": math.ceil(total / page_size) if page_size else 0,
        "total_items": total,
        "items_per_page": page_size,
    }
