import pytest

from models import CreateCommunicationRequest
from service_modules.communication_service import communication_service
from service_modules.errors import NotFound, ValidationError


def _message(branch_id, member_id=None, text="Gym closed on Sunday", type="announcement"):
    return CreateCommunicationRequest(branch_id=branch_id, member_id=member_id, type=type, message=text)


def test_log_and_list_communications(owner_setup, make_member):
    ctx, branch = owner_setup
    member = make_member(branch.id)

    first = communication_service.create_communication(ctx, _message(branch.id))
    second = communication_service.create_communication(
        ctx, _message(branch.id, member.id, "Your fee is due", type="whatsapp")
    )

    assert first.status == "sent"
    listed = communication_service.communications(ctx)
    assert [c.id for c in listed] == [second.id, first.id]
    assert [c.id for c in communication_service.communications(ctx, branch.id)] == [second.id, first.id]


def test_member_must_belong_to_branch(owner_setup, make_branch, make_member):
    ctx, branch = owner_setup
    other_branch = make_branch(ctx, gym_name="Second Gym", branch_name="Uptown")
    member = make_member(other_branch.id)

    with pytest.raises(ValidationError):
        communication_service.create_communication(ctx, _message(branch.id, member.id))


def test_communications_are_owner_scoped(owner_setup, make_owner, make_branch):
    ctx, branch = owner_setup
    communication_service.create_communication(ctx, _message(branch.id))
    other = make_owner("bob")
    make_branch(other, gym_name="Bob's Gym")

    assert communication_service.communications(other) == []
    with pytest.raises(NotFound):
        communication_service.create_communication(other, _message(branch.id))
    with pytest.raises(NotFound):
        communication_service.communications(other, branch.id)
