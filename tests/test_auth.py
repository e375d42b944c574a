import pytest

from logdistr.auth import Authorizer, PermissionDeniedError


@pytest.fixture
def authorizer(tmp_path):
    policy = tmp_path / "policy.csv"
    policy.write_text("p, root, *, produce\np, root, *, consume\n")
    return Authorizer(policy)


def test_root_may_produce_but_not_delete(authorizer):
    assert authorizer.authorize("root", "*", "produce") is None
    with pytest.raises(PermissionDeniedError):
        authorizer.authorize("root", "*", "delete")


def test_nobody_is_denied_with_message(authorizer):
    with pytest.raises(PermissionDeniedError) as info:
        authorizer.authorize("nobody", "*", "produce")
    assert str(info.value) == "nobody not permitted to produce to *"
    assert info.value.subject == "nobody"
    assert info.value.action == "produce"


def test_object_must_match_exactly(authorizer):
    with pytest.raises(PermissionDeniedError) as info:
        authorizer.authorize("root", "topic", "consume")
    assert info.value.object == "topic"


def test_denial_is_a_permission_error(authorizer):
    with pytest.raises(PermissionError):
        authorizer.authorize("", "*", "consume")


def test_comments_and_other_lines_ignored(tmp_path):
    policy = tmp_path / "policy.csv"
    policy.write_text("# comment\n\ng, alice, root\np, alice, *, consume\n")
    authorizer = Authorizer(policy)
    assert authorizer.authorize("alice", "*", "consume") is None
    with pytest.raises(PermissionDeniedError):
        authorizer.authorize("alice", "*", "produce")


def test_missing_policy_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Authorizer(tmp_path / "missing.csv")