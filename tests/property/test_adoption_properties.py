"""Property-based tests for the adoption lifecycle."""

import uuid
from collections import Counter
from unittest.mock import AsyncMock

import pytest
from hypothesis import given, settings, strategies as st, HealthCheck
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AdoptionError
from app.models.application import Application
from app.models.enums import ACTIVE_APPLICATION_STATUSES, ApplicationStatus, PetStatus, UserRole
from app.models.pet import Pet
from app.models.user import User
from app.services.adoption_service import AdoptionService
from app.services.application_rules import (
    PriorApplication,
    classify_prior_applications,
    ensure_can_apply,
    recompute_pet_status,
)


# Hypothesis strategies
status_strategy = st.sampled_from(list(ApplicationStatus))
status_list_strategy = st.lists(status_strategy, max_size=10)

operation_strategy = st.tuples(
    st.sampled_from(["submit", "approve", "reject", "delete"]),
    st.integers(min_value=0, max_value=2),  # applicant
    st.integers(min_value=0, max_value=1),  # pet
)


@given(statuses=status_list_strategy)
def test_property_recompute_is_total(statuses):
    """
    For any collection of applications, the pet gets exactly one status and
    it is Adopted iff an Approved application exists.
    """
    result = recompute_pet_status(statuses)

    assert result in set(PetStatus)
    assert (result is PetStatus.ADOPTED) == (ApplicationStatus.APPROVED in statuses)
    if result is PetStatus.AVAILABLE:
        assert ApplicationStatus.PENDING not in statuses


@given(statuses=status_list_strategy)
def test_property_recompute_ignores_order(statuses):
    assert recompute_pet_status(statuses) is recompute_pet_status(list(reversed(statuses)))


@given(statuses=status_list_strategy)
def test_property_any_history_blocks_reapplying(statuses):
    """A user may apply only when they have never applied for the pet."""
    prior = classify_prior_applications(statuses)

    if statuses:
        assert prior is not PriorApplication.NONE
        with pytest.raises(AdoptionError):
            ensure_can_apply(prior)
    else:
        ensure_can_apply(prior)


async def _setup_world(session: AsyncSession):
    tag = uuid.uuid4().hex[:8]
    applicants = [
        User(
            email=f"applicant{i}-{tag}@example.com",
            hashed_password="hashed",
            name=f"Applicant {i}",
            role=UserRole.USER.value,
        )
        for i in range(3)
    ]
    admin = User(
        email=f"admin-{tag}@example.com",
        hashed_password="hashed",
        name="Admin",
        role=UserRole.ADMIN.value,
    )
    pets = [
        Pet(
            name=f"Pet {i}",
            species="Dog",
            breed="Mixed",
            age=2,
            description="Sweet dog looking for a home.",
            image="https://images.example.com/dog.jpg",
        )
        for i in range(2)
    ]
    session.add_all([*applicants, admin, *pets])
    await session.commit()
    return [u.id for u in applicants], admin.id, [p.id for p in pets]


async def _find_application(session, user_id, pet_id):
    result = await session.execute(
        select(Application.id).where(
            Application.user_id == user_id,
            Application.pet_id == pet_id,
        )
    )
    return result.scalars().first()


async def _assert_invariants(session: AsyncSession, pet_ids):
    result = await session.execute(
        select(Application.pet_id, Application.user_id, Application.status)
        .where(Application.pet_id.in_(pet_ids))
    )
    rows = result.all()

    active = Counter(
        (pet_id, user_id)
        for pet_id, user_id, status in rows
        if ApplicationStatus(status) in ACTIVE_APPLICATION_STATUSES
    )
    assert all(count <= 1 for count in active.values())

    approved = Counter(
        pet_id for pet_id, _, status in rows if status == ApplicationStatus.APPROVED.value
    )
    assert all(count <= 1 for count in approved.values())

    for pet_id in pet_ids:
        pet = await session.get(Pet, pet_id)
        statuses = [status for p, _, status in rows if p == pet_id]
        assert pet.status == recompute_pet_status(statuses).value


@pytest.mark.asyncio
@settings(
    max_examples=25,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture]
)
@given(operations=st.lists(operation_strategy, max_size=12))
async def test_property_lifecycle_invariants(operations, async_session: AsyncSession):
    """
    After any sequence of submits, reviews and deletes:
    - each (user, pet) pair has at most one active application
    - each pet has at most one approved application
    - each pet's status matches its applications
    """
    service = AdoptionService(AsyncMock())
    applicant_ids, admin_id, pet_ids = await _setup_world(async_session)

    for op, applicant, pet in operations:
        user_id, pet_id = applicant_ids[applicant], pet_ids[pet]
        application_id = await _find_application(async_session, user_id, pet_id)
        try:
            if op == "submit":
                await service.submit(async_session, user_id, pet_id, "Please")
            elif application_id is None:
                pass
            elif op == "approve":
                await service.review(async_session, application_id, admin_id, "Approved")
            elif op == "reject":
                await service.review(async_session, application_id, admin_id, "Rejected")
            else:
                await service.delete(async_session, application_id, user_id, "user")
        except AdoptionError:
            pass

        await _assert_invariants(async_session, pet_ids)
