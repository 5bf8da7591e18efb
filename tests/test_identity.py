import pytest

from focuscycle.core.identity import ACTOR_KEY, Actor, ActorKind, StoredIdentity
from focuscycle.data.storage import Storage


@pytest.fixture
def storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    return storage


def test_defaults_to_guest(storage) -> None:
    actor = StoredIdentity(storage).current_actor()

    assert actor == Actor.guest()
    assert actor.is_guest is True


def test_sign_in_is_seen_by_later_lookups(storage) -> None:
    identity = StoredIdentity(storage)
    assert identity.current_actor().is_guest

    StoredIdentity(storage).sign_in("  user-7 ", "tok")

    assert identity.current_actor() == Actor(kind=ActorKind.IDENTIFIED, id="user-7", token="tok")


def test_sign_out_returns_to_guest(storage) -> None:
    identity = StoredIdentity(storage)
    identity.sign_in("user-7")
    identity.sign_out()

    assert identity.current_actor().is_guest


def test_sign_in_requires_id(storage) -> None:
    with pytest.raises(ValueError):
        StoredIdentity(storage).sign_in("   ")


@pytest.mark.parametrize(
    "stored",
    ["user-7", {"kind": "identified"}, {"kind": "identified", "id": ""}, {"kind": "admin", "id": "x"}],
)
def test_malformed_actor_is_treated_as_guest(storage, stored) -> None:
    storage.set_setting(ACTOR_KEY, stored)

    assert StoredIdentity(storage).current_actor().is_guest
