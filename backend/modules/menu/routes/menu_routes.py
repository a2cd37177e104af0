# backend/modules/menu/routes/menu_routes.py

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.container import get_menu_service
from core.auth import get_current_user, require_roles
from modules.staff.enums.staff_enums import StaffRole
from modules.staff.schemas.staff_schemas import StaffUser
from ..schemas.menu_schemas import (
    CategoryCreate,
    CategoryRename,
    CategoryResponse,
    MenuItem,
    MenuItemCreate,
    MenuItemUpdate,
)
from ..services.menu_service import MenuService

router = APIRouter(prefix="/menu", tags=["Menu Management"])

manager_only = require_roles(StaffRole.MANAGER)


# Category endpoints
@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    current_user: StaffUser = Depends(get_current_user),
    service: MenuService = Depends(get_menu_service),
):
    return service.list_categories()


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    category: CategoryCreate,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    return CategoryResponse(name=service.create_category(category.name))


@router.put("/categories/{name}", response_model=CategoryResponse)
def rename_category(
    name: str,
    rename: CategoryRename,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    """Rename a category; its menu items move with it"""
    new_name = service.rename_category(name, rename.new_name)
    return next(c for c in service.list_categories() if c.name == new_name)


@router.delete("/categories/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    name: str,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    """Delete a category; refused while menu items still use it"""
    service.delete_category(name)


# Menu item endpoints
@router.get("/items", response_model=List[MenuItem])
def list_menu_items(
    category: Optional[str] = Query(None, description="Filter by category name"),
    available_only: bool = Query(False),
    current_user: StaffUser = Depends(get_current_user),
    service: MenuService = Depends(get_menu_service),
):
    return service.list_menu_items(category=category, available_only=available_only)


@router.get("/items/{item_id}", response_model=MenuItem)
def get_menu_item(
    item_id: str,
    current_user: StaffUser = Depends(get_current_user),
    service: MenuService = Depends(get_menu_service),
):
    return service.get_menu_item(item_id)


@router.post("/items", response_model=MenuItem, status_code=status.HTTP_201_CREATED)
def create_menu_item(
    item: MenuItemCreate,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    return service.create_menu_item(item)


@router.put("/items/{item_id}", response_model=MenuItem)
def update_menu_item(
    item_id: str,
    item: MenuItemUpdate,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    return service.update_menu_item(item_id, item)


@router.post("/items/{item_id}/toggle-availability", response_model=MenuItem)
def toggle_menu_item_availability(
    item_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    return service.toggle_availability(item_id)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(
    item_id: str,
    current_user: StaffUser = Depends(manager_only),
    service: MenuService = Depends(get_menu_service),
):
    service.delete_menu_item(item_id)
