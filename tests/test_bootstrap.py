# File: tests/test_bootstrap.py

from lms.core.security import verify_password
from lms.db.init_db import seed_initial_data
from lms.models.user import UserRole
from lms.services import user_service


def test_seed_creates_default_accounts(db, settings):
    created = seed_initial_data(db, settings)

    assert created == [settings.default_librarian_email, settings.default_member_email]

    librarian = user_service.find_by_email(db, settings.default_librarian_email)
    member = user_service.find_by_email(db, settings.default_member_email)
    assert librarian.role == UserRole.LIBRARIAN
    assert (librarian.first_name, librarian.last_name) == ("System", "Librarian")
    assert member.role == UserRole.MEMBER
    assert verify_password(settings.default_member_password, member.password_hash)


def test_seed_is_idempotent(db, settings):
    seed_initial_data(db, settings)

    assert seed_initial_data(db, settings) == []
    assert len(user_service.list_users(db)) == 2


def test_seed_skips_taken_email(db, settings):
    from conftest import make_user

    make_user(db, settings.default_librarian_email, UserRole.LIBRARIAN, first_name="Existing")

    assert seed_initial_data(db, settings) == [settings.default_member_email]
    assert user_service.find_by_email(db, settings.default_librarian_email).first_name == "Existing"


def test_seeded_librarian_can_log_in(client, db, settings):
    seed_initial_data(db, settings)

    resp = client.post(
        "/api/auth/login",
        json={"email": settings.default_librarian_email, "password": settings.default_librarian_password},
    )

    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "LIBRARIAN"
