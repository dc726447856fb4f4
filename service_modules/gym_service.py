"""
Gym Service - an owner's gyms and their branches.
"""
from typing import List, Optional

from models import CreateGymRequest, CreateBranchRequest, Gym, Branch
from .base import get_db_session, GymORM, BranchORM, logger
from .qr_service import apply_registration_qr
from .scoping import OwnerScope


class GymService:

    def create_gym(self, ctx, data: CreateGymRequest) -> Gym:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            gym = GymORM(
                name=data.name,
                owner_id=scope.owner_id,
                address=data.address,
                phone=data.phone,
                email=data.email,
            )
            db.add(gym)
            db.commit()
            logger.info(f"Owner {scope.owner_id} created gym {gym.id}")
            return Gym.model_validate(gym)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list_gyms(self, ctx) -> List[Gym]:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            return [Gym.model_validate(g) for g in scope.gyms().all()]
        finally:
            db.close()

    def create_branch(self, ctx, data: CreateBranchRequest, base_url: Optional[str] = None) -> Branch:
        """Create a branch in one of the owner's gyms, with its first registration QR."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            gym = scope.get(GymORM, data.gym_id)

            branch = BranchORM(
                name=data.name,
                gym_id=gym.id,
                address=data.address,
                phone=data.phone,
                is_active=True,
            )
            db.add(branch)
            db.flush()  # need branch.id for the registration URL
            apply_registration_qr(branch, base_url)
            db.commit()

            logger.info(f"Owner {scope.owner_id} created branch {branch.id} in gym {gym.id}")
            return Branch.model_validate(branch)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def list_branches(self, ctx, gym_id: str) -> List[Branch]:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            scope.get(GymORM, gym_id)
            return [Branch.model_validate(b) for b in scope.branches(gym_id).all()]
        finally:
            db.close()

    def get_branch(self, ctx, branch_id: str) -> Branch:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            return Branch.model_validate(scope.get(BranchORM, branch_id))
        finally:
            db.close()


# Singleton instance
gym_service = GymService()


def get_gym_service() -> GymService:
    """Dependency injection helper."""
    return gym_service
