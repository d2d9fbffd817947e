from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import Optional

from src.database import get_db
from src.auth.dependencies import get_optional_user, require_admin
from src.models import User
from src.packages.schemas import (
    PackageCreate, PackageUpdate, PackageIdRequest, PackageOut,
    PackageDetailCreate, PackageDetailUpdate, PackageDetailOut, PackageWithDetails
)
from src.packages.service import CatalogService

# Public catalog (mounted under /common)
public_router = APIRouter()

# Catalog management (mounted under /admin)
admin_router = APIRouter()

@public_router.post("/getPackages")
def get_packages(db: Session = Depends(get_db)):
    """Active packages, newest first"""
    packages = CatalogService(db).list_active_packages()
    return {"status": "success", "data": [PackageOut.model_validate(p) for p in packages]}

@public_router.post("/getPackageById")
def get_package_by_id(
    payload: PackageIdRequest,
    db: Session = Depends(get_db),
    caller: Optional[User] = Depends(get_optional_user)
):
    """Get one package; soft-deleted packages are visible to admins only"""
    include_inactive = caller is not None and caller.is_admin
    package = CatalogService(db).get_package(payload.package_id, include_inactive=include_inactive)
    return {"status": "success", "data": PackageOut.model_validate(package)}

@public_router.post("/getPackageDetails")
def get_package_details(
    payload: PackageIdRequest,
    db: Session = Depends(get_db),
    caller: Optional[User] = Depends(get_optional_user)
):
    """Get a package together with its detail document"""
    service = CatalogService(db)
    include_inactive = caller is not None and caller.is_admin
    package = service.get_package(payload.package_id, include_inactive=include_inactive)
    detail = service.get_package_details(package.id)

    data = PackageWithDetails(
        package=PackageOut.model_validate(package),
        details=PackageDetailOut.model_validate(detail) if detail else None
    )
    return {"status": "success", "data": data}

@admin_router.post("/getAllPackages")
def get_all_packages(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    """All packages including soft-deleted ones"""
    packages = CatalogService(db).list_all_packages()
    return {"status": "success", "data": [PackageOut.model_validate(p) for p in packages]}

@admin_router.post("/createPackage", status_code=status.HTTP_201_CREATED)
def create_package(
    payload: PackageCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    package = CatalogService(db).create_package(payload, created_by=admin)
    return {
        "status": "success",
        "message": "Package created successfully",
        "data": PackageOut.model_validate(package)
    }

@admin_router.post("/updatePackage")
def update_package(
    payload: PackageUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    package = CatalogService(db).update_package(payload)
    return {
        "status": "success",
        "message": "Package updated successfully",
        "data": PackageOut.model_validate(package)
    }

@admin_router.post("/deletePackage")
def delete_package(
    payload: PackageIdRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    """Soft-delete a package and remove its details"""
    package = CatalogService(db).soft_delete_package(payload.package_id)
    return {
        "status": "success",
        "message": "Package deleted successfully",
        "data": PackageOut.model_validate(package)
    }

@admin_router.post("/addPackageDetails", status_code=status.HTTP_201_CREATED)
def add_package_details(
    payload: PackageDetailCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    detail = CatalogService(db).add_package_details(payload, created_by=admin)
    return {
        "status": "success",
        "message": "Package details added successfully",
        "data": PackageDetailOut.model_validate(detail)
    }

@admin_router.post("/updatePackageDetails")
def update_package_details(
    payload: PackageDetailUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    detail = CatalogService(db).update_package_details(payload)
    return {
        "status": "success",
        "message": "Package details updated successfully",
        "data": PackageDetailOut.model_validate(detail)
    }

@admin_router.post("/deletePackageDetails")
def delete_package_details(
    payload: PackageIdRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin)
):
    CatalogService(db).delete_package_details(payload.package_id)
    return {"status": "success", "message": "Package details deleted successfully"}
