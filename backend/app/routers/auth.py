"""
认证路由
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.schemas import LoginRequest, LoginResponse, PasswordChange, StaffResponse
from app.models.ontology import Employee
from app.lodge.services.staff_service import StaffService, to_staff_response
from app.security.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["认证"])


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """邮箱密码登录"""
    service = StaffService(db)
    try:
        result = service.authenticate(data.email, data.password)
        if not result:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="邮箱或密码错误"
            )
        return result
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))


@router.get("/me", response_model=StaffResponse)
def get_current_user_info(current_user: Employee = Depends(get_current_user)):
    """获取当前用户信息（含角色权限）"""
    return to_staff_response(current_user)


@router.post("/change-password")
def change_password(
    data: PasswordChange,
    current_user: Employee = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """修改密码"""
    service = StaffService(db)
    try:
        service.change_password(current_user, data)
        return {"message": "密码修改成功"}
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
