from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
import structlog

from src.models import Package, PackageDetail, PackageStatus, User
from src.packages.schemas import PackageCreate, PackageUpdate, PackageDetailCreate, PackageDetailUpdate
from src.exceptions import PackageNotFoundError, PackageDetailNotFoundError, DetailAlreadyExistsError

logger = structlog.get_logger(__name__)

DETAIL_SECTIONS = (
    "itinerary", "inclusions", "exclusions", "terms", "best_time_to_visit",
    "group_size", "pricing", "gallery", "reviews",
)

class CatalogService:
    """Tour packages and their one-to-one detail documents"""

    def __init__(self, db: Session):
        self.db = db

    # Packages
    def list_active_packages(self) -> List[Package]:
        return self.db.query(Package).filter(
            Package.status == int(PackageStatus.ACTIVE)
        ).order_by(Package.created_at.desc(), Package.id.desc()).all()

    def list_all_packages(self) -> List[Package]:
        """Every package, soft-deleted ones included"""
        return self.db.query(Package).order_by(Package.created_at.desc(), Package.id.desc()).all()

    def get_package(self, package_id: int, include_inactive: bool = False) -> Package:
        query = self.db.query(Package).filter(Package.id == package_id)
        if not include_inactive:
            query = query.filter(Package.status == int(PackageStatus.ACTIVE))
        package = query.first()
        if not package:
            raise PackageNotFoundError()
        return package

    def create_package(self, data: PackageCreate, created_by: User) -> Package:
        package = Package(
            title=data.title,
            description=data.description,
            locations=list(data.locations),
            price=data.price,
            duration=data.duration,
            image_url=data.image_url,
            created_by=created_by.id,
            status=int(PackageStatus.ACTIVE)
        )
        self.db.add(package)
        self.db.commit()
        self.db.refresh(package)

        logger.info("package_created", package_id=package.id, created_by=created_by.id)
        return package

    def update_package(self, data: PackageUpdate) -> Package:
        package = self.get_package(data.package_id, include_inactive=True)

        update_data = data.model_dump(exclude_unset=True, exclude={"package_id"})
        for field, value in update_data.items():
            if value is not None:
                setattr(package, field, value)
        package.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(package)

        logger.info("package_updated", package_id=package.id, fields=sorted(update_data))
        return package

    def soft_delete_package(self, package_id: int) -> Package:
        """Hide the package and drop its detail document for good"""
        package = self.get_package(package_id, include_inactive=True)

        package.status = int(PackageStatus.INACTIVE)
        package.updated_at = datetime.utcnow()
        detail = self._find_detail(package.id)
        if detail:
            self.db.delete(detail)
        self.db.commit()
        self.db.refresh(package)

        logger.info("package_deleted", package_id=package.id, detail_removed=detail is not None)
        return package

    # Package details
    def get_package_details(self, package_id: int) -> Optional[PackageDetail]:
        return self._find_detail(package_id)

    def add_package_details(self, data: PackageDetailCreate, created_by: User) -> PackageDetail:
        package = self.get_package(data.package_id)
        if self._find_detail(package.id):
            raise DetailAlreadyExistsError()

        sections = data.model_dump(mode="json", include=set(DETAIL_SECTIONS), by_alias=False)
        detail = PackageDetail(package_id=package.id, created_by=created_by.id, **sections)
        self.db.add(detail)
        self.db.commit()
        self.db.refresh(detail)

        logger.info("package_details_added", package_id=package.id)
        return detail

    def update_package_details(self, data: PackageDetailUpdate) -> PackageDetail:
        """Replace the sections present in the request, keep the rest"""
        package = self.get_package(data.package_id, include_inactive=True)
        detail = self._find_detail(package.id)
        if not detail:
            raise PackageDetailNotFoundError()

        sections = data.model_dump(mode="json", exclude_unset=True, exclude={"package_id"}, by_alias=False)
        for field, value in sections.items():
            setattr(detail, field, value)
        detail.updated_at = datetime.utcnow()

        self.db.commit()
        self.db.refresh(detail)

        logger.info("package_details_updated", package_id=package.id, fields=sorted(sections))
        return detail

    def delete_package_details(self, package_id: int) -> None:
        detail = self._find_detail(package_id)
        if not detail:
            raise PackageDetailNotFoundError()
        self.db.delete(detail)
        self.db.commit()
        logger.info("package_details_deleted", package_id=package_id)

    def unit_price(self, package: Package) -> Decimal:
        """Adult price from the detail document, falling back to the flat package price"""
        detail = self._find_detail(package.id)
        pricing = detail.pricing if detail else None
        if pricing and pricing.get("adult_price") is not None:
            return Decimal(str(pricing["adult_price"]))
        return Decimal(str(package.price))

    def _find_detail(self, package_id: int) -> Optional[PackageDetail]:
        return self.db.query(PackageDetail).filter(PackageDetail.package_id == package_id).first()
