"""Tests for the per-viewer game projection."""

from game.engine import create_game, join_game, start_game
from game.rules import Phase, Role
from game.view import GameView, PlayerView, SelfView, project


def _started():
    state = create_game("g1", "host")
    for name in ("b", "c", "d", "e"):
        state = join_game(state, name)
    return start_game(state, "host", seed=5)


def test_project_own_role_only():
    state = _started()
    view = project(state, "c")
    assert view.me is not None
    assert view.me.username == "c"
    assert view.me.role == state.get_player("c").role
    assert view.me.alive
    assert [p.username for p in view.players] == ["host", "b", "c", "d", "e"]
    for p in view.players:
        assert not hasattr(p, "role")


def test_project_outsider_has_no_me():
    view = project(_started(), "stranger")
    assert view.me is None
    assert len(view.players) == 5
    assert view.phase == Phase.NIGHT
    assert view.host == "host"
    assert view.winner is None


def test_project_lobby_role_unset():
    view = project(create_game("g2", "host"), "host")
    assert view.game_id == "g2"
    assert view.phase == Phase.LOBBY
    assert view.me.role is None


def test_project_reports_self_heal():
    state = _started()
    doctor = state.get_players_by_role(Role.DOCTOR)[0].username
    view = project(state, doctor)
    assert view.me.role == Role.DOCTOR
    assert view.me.self_heal_used is False


def test_view_classes_are_documented():
    # dataclasses fill in a signature as __doc__ when the class has none
    for cls in (GameView, SelfView, PlayerView):
        assert not cls.__doc__.startswith(f"{cls.__name__}(")
