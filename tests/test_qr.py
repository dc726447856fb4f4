import base64
import re

import pytest

from service_modules import member_service as member_module
from service_modules.errors import Conflict, NotFound
from service_modules.gym_service import gym_service
from service_modules.qr_service import (
    qr_service, issue_member_qr_id, build_registration_url, render_qr_data_url
)


def test_member_qr_ids_are_unique():
    ids = {issue_member_qr_id() for _ in range(10000)}
    assert len(ids) == 10000


def test_member_qr_id_format():
    assert re.fullmatch(r"QR_\d{13}_[0-9a-f]{12}", issue_member_qr_id())


def test_registration_url_carries_branch_id():
    url = build_registration_url("b-123", "https://gym.example.com/")
    assert url == "https://gym.example.com/register?branchId=b-123"


def test_qr_data_url_is_png():
    data_url = render_qr_data_url("https://gym.example.com/register?branchId=b-123")
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    assert base64.b64decode(data_url[len(prefix):]).startswith(b"\x89PNG")


def test_new_branch_gets_registration_qr(owner_setup):
    _, branch = owner_setup
    assert branch.qr_code_url.startswith("data:image/png;base64,")
    assert branch.registration_url.endswith(f"register?branchId={branch.id}")


def test_regenerate_replaces_stored_qr(owner_setup):
    ctx, branch = owner_setup
    result = qr_service.generate_branch_qr(ctx, branch.id, base_url="https://new.example.com")

    assert result.registration_url == f"https://new.example.com/register?branchId={branch.id}"
    stored = gym_service.get_branch(ctx, branch.id)
    assert stored.registration_url == result.registration_url
    assert stored.qr_code_url == result.qr_image
    assert stored.qr_code_url != branch.qr_code_url


def test_regenerate_for_foreign_branch_is_not_found(owner_setup, make_owner):
    _, branch = owner_setup
    intruder = make_owner("mallory")
    with pytest.raises(NotFound):
        qr_service.generate_branch_qr(intruder, branch.id)


def test_member_registration_retries_on_qr_collision(owner_setup, make_member, monkeypatch):
    _, branch = owner_setup
    first = make_member(branch.id, name="First")

    issued = iter([first.qr_code_id, first.qr_code_id, "QR_1700000000000_abcdefabcdef"])
    monkeypatch.setattr(member_module, "issue_member_qr_id", lambda: next(issued))

    second = make_member(branch.id, name="Second")
    assert second.qr_code_id == "QR_1700000000000_abcdefabcdef"


def test_member_registration_gives_up_after_repeated_collisions(owner_setup, make_member, monkeypatch):
    ctx, branch = owner_setup
    first = make_member(branch.id, name="First")
    monkeypatch.setattr(member_module, "issue_member_qr_id", lambda: first.qr_code_id)

    with pytest.raises(Conflict):
        make_member(branch.id, name="Second")

    assert len(member_module.member_service.list_members(ctx)) == 1
