from fastapi import APIRouter

from employee_service.api.v1 import admins, employees

api_router = APIRouter()
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(admins.router, prefix="/admins", tags=["admins"])
