from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.db.base import Base
from app.db.models import (
    AvailabilitySchedule,
    CoverageArea,
    ProfessionalProfile,
    ServiceCategory,
    Specialty,
    User,
    UserRole,
)
from app.services.category_service import DatabaseCategoryProvider
from app.services.profile_sync_service import synchronize_service_profile
from factories import make_specialty, profile_request


@pytest.mark.concurrent
def test_parallel_first_syncs_leave_a_single_configuration(tmp_path):
    db_file = tmp_path / "race.db"
    engine = create_engine(f"sqlite+pysqlite:///{db_file}", connect_args={"check_same_thread": False})
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)

    seed_session = SessionLocal()
    user = User(email="race-pro@example.com", hashed_password="x", role=UserRole.PROFESSIONAL.value)
    user.professional_profile = ProfessionalProfile(display_name="Race Professional", description=None)
    category = ServiceCategory(name="Race Plumbing", description=None, is_active=True)
    seed_session.add_all([user, category])
    seed_session.commit()
    professional_id = user.professional_profile.id
    category_id = category.id
    seed_session.close()

    def attempt() -> str:
        session = SessionLocal()
        try:
            status = synchronize_service_profile(
                db=session,
                professional_id=professional_id,
                payload=profile_request([make_specialty(category_id)]),
                categories=DatabaseCategoryProvider(session),
            )
            return status.value
        except SQLAlchemyError:
            return "failed"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: attempt(), range(2)))

    assert "created" in results

    check = SessionLocal()
    active = check.scalar(
        select(func.count(Specialty.id)).where(
            Specialty.professional_id == professional_id,
            Specialty.active.is_(True),
        )
    )
    areas = check.scalar(select(func.count(CoverageArea.id)))
    schedules = check.scalar(select(func.count(AvailabilitySchedule.id)))
    check.close()
    engine.dispose()

    assert (active, areas, schedules) == (1, 1, 1)
