# app/core/auth.py
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.database import get_db
from app.models.user import User
from app.models.employee import Employee
from app.config import settings
from app.core.exceptions import UnauthorizedError

reusable_oauth2 = HTTPBearer()

# Roles that see every department
GLOBAL_ROLES = ("admin", "supervisor")

async def get_current_user(
    db: AsyncSession = Depends(get_db),
    token: HTTPAuthorizationCredentials = Depends(reusable_oauth2)
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(
            token.credentials,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
        user_id: str = payload.get("sub")
        if user_id is None or payload.get("type", "access") != "access":
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    result = await db.execute(select(User).where(User.id == int(user_id)))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise credentials_exception
    return user


def require_roles(*roles: str):
    async def checker(current_user = Depends(get_current_user)):
        if current_user.role not in roles:
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Insufficient permissions")
        return current_user
    return checker


def department_scope(user):
    """Department a principal is confined to, or None for unrestricted roles."""
    if user.role in GLOBAL_ROLES:
        return None
    if user.department_id is None:
        raise UnauthorizedError("No department assigned")
    return user.department_id


def ensure_can_evaluate(user, employee: Employee) -> None:
    if user.role in GLOBAL_ROLES:
        return
    if user.role == "manager" and employee.department_id == user.department_id:
        return
    if user.role == "manager":
        raise UnauthorizedError("Cannot evaluate employees from other departments")
    raise UnauthorizedError("Insufficient permissions")


async def get_accessible_employee(
    employee_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    employee = result.scalar_one_or_none()
    if not employee:
        raise HTTPException(404, "Employee not found")

    if current_user.role in GLOBAL_ROLES:
        return employee
    if current_user.role == "manager" and employee.department_id == current_user.department_id:
        return employee
    raise HTTPException(403, "Cannot access employees from other departments")
