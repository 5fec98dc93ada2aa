"""Admin API: users, categories, zones and system settings."""

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status

from civicreports.core.deps import get_admin_catalog, get_report_store
from civicreports.schemas.admin import (
    Category,
    CategoryCreate,
    CategoryUpdate,
    SettingUpdate,
    SystemSetting,
    User,
    UserCreate,
    UserStats,
    UserUpdate,
    Zone,
    ZoneCreate,
    ZoneUpdate,
)
from civicreports.schemas.report import Report
from civicreports.services.admin_service import SYSTEM_ACTOR, AdminCatalog
from civicreports.services.db_report_store import StoreUnavailableError
from civicreports.services.report_store import ReportStore

router = APIRouter(prefix="/admin", tags=["admin"])


def get_actor(x_actor: str | None = Header(default=None)) -> str:
    """Who is making the change; recorded on admin activities."""
    return (x_actor or "").strip() or SYSTEM_ACTOR


def _not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


# -- users ---------------------------------------------------------------


@router.get("/users", response_model=list[User])
def list_users(
    q: str | None = None,
    role: str | None = None,
    catalog: AdminCatalog = Depends(get_admin_catalog),
):
    """Search by name or email, filter by role."""
    return catalog.list_users(query=q, role=role)


@router.get("/users/stats", response_model=UserStats)
def user_stats(catalog: AdminCatalog = Depends(get_admin_catalog)):
    return catalog.user_stats()


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    try:
        return catalog.create_user(data, actor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: str, catalog: AdminCatalog = Depends(get_admin_catalog)):
    user = catalog.get_user(user_id)
    if user is None:
        raise _not_found("User")
    return user


@router.patch("/users/{user_id}", response_model=User)
def update_user(
    user_id: str,
    data: UserUpdate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    try:
        user = catalog.update_user(user_id, data, actor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if user is None:
        raise _not_found("User")
    return user


@router.post("/users/{user_id}/deactivate", response_model=User)
def deactivate_user(
    user_id: str,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    user = catalog.deactivate_user(user_id, actor)
    if user is None:
        raise _not_found("User")
    return user


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    """Reports assigned to the user keep their assignee."""
    if not catalog.delete_user(user_id, actor):
        raise _not_found("User")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- categories ----------------------------------------------------------


@router.get("/categories", response_model=list[Category])
def list_categories(
    active_only: bool = False,
    catalog: AdminCatalog = Depends(get_admin_catalog),
):
    return catalog.list_categories(active_only=active_only)


@router.post("/categories", response_model=Category, status_code=status.HTTP_201_CREATED)
def create_category(
    data: CategoryCreate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    try:
        return catalog.create_category(data, actor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/categories/{category_id}", response_model=Category)
def get_category(category_id: str, catalog: AdminCatalog = Depends(get_admin_catalog)):
    category = catalog.get_category(category_id)
    if category is None:
        raise _not_found("Category")
    return category


@router.patch("/categories/{category_id}", response_model=Category)
def update_category(
    category_id: str,
    data: CategoryUpdate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    try:
        category = catalog.update_category(category_id, data, actor)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if category is None:
        raise _not_found("Category")
    return category


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    if not catalog.delete_category(category_id, actor):
        raise _not_found("Category")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/categories/{category_id}/reports", response_model=list[Report])
def category_reports(
    category_id: str,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    store: ReportStore = Depends(get_report_store),
):
    """Reports filed under the category's name."""
    category = catalog.get_category(category_id)
    if category is None:
        raise _not_found("Category")
    try:
        reports = store.list()
    except StoreUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return [r for r in reports if r.category == category.name]


# -- zones ---------------------------------------------------------------


@router.get("/zones", response_model=list[Zone])
def list_zones(catalog: AdminCatalog = Depends(get_admin_catalog)):
    return catalog.list_zones()


@router.post("/zones", response_model=Zone, status_code=status.HTTP_201_CREATED)
def create_zone(
    data: ZoneCreate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    return catalog.create_zone(data, actor)


@router.patch("/zones/{zone_id}", response_model=Zone)
def update_zone(
    zone_id: str,
    data: ZoneUpdate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    zone = catalog.update_zone(zone_id, data, actor)
    if zone is None:
        raise _not_found("Zone")
    return zone


@router.delete("/zones/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_zone(
    zone_id: str,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    if not catalog.delete_zone(zone_id, actor):
        raise _not_found("Zone")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# -- settings ------------------------------------------------------------


@router.get("/settings", response_model=list[SystemSetting])
def list_settings(group: str | None = None, catalog: AdminCatalog = Depends(get_admin_catalog)):
    return catalog.list_settings(group)


@router.put("/settings/{setting_id}", response_model=SystemSetting)
def update_setting(
    setting_id: str,
    data: SettingUpdate,
    catalog: AdminCatalog = Depends(get_admin_catalog),
    actor: str = Depends(get_actor),
):
    setting = catalog.update_setting(setting_id, data, actor)
    if setting is None:
        raise _not_found("Setting")
    return setting
