# tests/test_roles.py
import pytest
from fastapi import HTTPException

from app.core.roles import (
    Role,
    email_domain,
    is_staff,
    normalize_email,
    portal_for_role,
    require_staff,
    role_for_email,
)
from app.models.user import User


class TestRoleForEmail:
    def test_staff_domain(self):
        assert role_for_email("warden@risestudentliving.com") is Role.STAFF

    def test_staff_domain_is_case_insensitive(self):
        assert role_for_email("Warden@RiseStudentLiving.com") is Role.STAFF

    @pytest.mark.parametrize(
        "email",
        [
            "thabo@student.spu.ac.za",
            "someone@gmail.com",
            # suffix match is on the whole domain, not a substring
            "eve@notrisestudentliving.com",
            "eve@risestudentliving.com.evil.org",
        ],
    )
    def test_everyone_else_is_student(self, email):
        assert role_for_email(email) is Role.STUDENT

    def test_explicit_domains_override_settings(self):
        assert role_for_email("ops@facilities.example.org", ["facilities.example.org"]) is Role.STAFF
        assert role_for_email("warden@risestudentliving.com", []) is Role.STUDENT

    def test_portal(self):
        assert portal_for_role(Role.STAFF) == "/admin"
        assert portal_for_role(Role.STUDENT) == "/student"

    def test_email_domain(self):
        assert email_domain("A@B.Example.org") == "b.example.org"
        assert email_domain("no-at-sign") == ""


class TestNormalizeEmail:
    def test_lowercases(self):
        assert normalize_email("  Thabo@Student.SPU.ac.za ") == "thabo@student.spu.ac.za"

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            normalize_email("not-an-email")


class TestStaffGuard:
    def test_require_staff(self):
        require_staff(User(email="warden@risestudentliving.com"))
        with pytest.raises(HTTPException) as exc:
            require_staff(User(email="thabo@student.spu.ac.za"))
        assert exc.value.status_code == 403

    def test_role_ignores_account_type(self):
        # Routing follows the verified email, not the stored account type.
        assert not is_staff(User(email="thabo@student.spu.ac.za", account_type="admin"))
