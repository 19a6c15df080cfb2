"""
tests/test_survey_service.py
Per-session controller registry.
"""
from collections import OrderedDict

from security_surveyor.services import survey_service


def _fresh_registry(monkeypatch, max_sessions=3):
    built = []

    def build():
        controller = object()
        built.append(controller)
        return controller

    monkeypatch.setattr(survey_service, "_controllers", OrderedDict())
    monkeypatch.setattr(survey_service, "MAX_SESSIONS", max_sessions)
    monkeypatch.setattr(survey_service, "build_controller", build)
    return built


def test_same_token_reuses_controller(monkeypatch):
    built = _fresh_registry(monkeypatch)
    first = survey_service.get_controller("token-a")
    assert survey_service.get_controller("token-a") is first
    assert len(built) == 1


def test_registry_is_bounded(monkeypatch):
    _fresh_registry(monkeypatch, max_sessions=3)
    for n in range(10):
        survey_service.get_controller(f"token-{n}")

    assert len(survey_service._controllers) == 3
    assert list(survey_service._controllers) == ["token-7", "token-8", "token-9"]


def test_least_recently_used_is_evicted(monkeypatch):
    _fresh_registry(monkeypatch, max_sessions=2)
    a = survey_service.get_controller("token-a")
    survey_service.get_controller("token-b")
    # Touch a so b becomes the oldest
    assert survey_service.get_controller("token-a") is a
    survey_service.get_controller("token-c")

    assert list(survey_service._controllers) == ["token-a", "token-c"]
