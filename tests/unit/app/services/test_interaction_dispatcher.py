"""Testes do dispatcher de interações e da task diferida."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from app.domain.commands import LookupUser
from app.domain.interaction import Interaction
from app.observability import get_correlation_id
from app.services.directory_commands import DirectoryCommandExecutor
from app.services.interaction_dispatcher import DeferredTask, InteractionDispatcher
from fsm import InteractionState, create_fsm
from tests.fakes.fake_directory import FakeDirectoryClient, FakeFollowupSender
from utils.errors import FollowupDeliveryError, UnsupportedInteractionError, UpstreamApiError

USER_RESPONSE = {
    "primaryEmail": "ana@example.com",
    "name": {"fullName": "Ana Lima"},
    "orgUnitPath": "/",
    "suspended": True,
}


def _interaction(name: str | None = None, options: list[dict[str, Any]] | None = None, **kw):
    payload: dict[str, Any] = {"type": 2, "id": "int-1", "token": "reply-token"}
    if name is not None:
        payload["data"] = {"name": name, "options": options or []}
    payload.update(kw)
    return Interaction.model_validate(payload)


def _admin(group: str, sub: str, **values: str) -> list[dict[str, Any]]:
    leaf = [{"name": k, "type": 3, "value": v} for k, v in values.items()]
    return [{"name": group, "type": 2, "options": [{"name": sub, "type": 1, "options": leaf}]}]


def _dispatcher(
    directory: FakeDirectoryClient | None = None,
    followup: FakeFollowupSender | None = None,
) -> tuple[InteractionDispatcher, FakeDirectoryClient, FakeFollowupSender]:
    directory = directory or FakeDirectoryClient(responses={"get_user": USER_RESPONSE})
    followup = followup or FakeFollowupSender()
    dispatcher = InteractionDispatcher(
        executor=DirectoryCommandExecutor(directory),
        followup_sender=followup,
    )
    return dispatcher, directory, followup


class TestSynchronousResponses:
    def test_ping_gets_pong(self) -> None:
        dispatcher, directory, followup = _dispatcher()

        result = dispatcher.dispatch(Interaction.model_validate({"type": 1, "id": "p"}))

        assert result.response == {"type": 1}
        assert result.deferred is None
        assert directory.calls == []

    def test_unsupported_type(self) -> None:
        dispatcher, _, _ = _dispatcher()

        with pytest.raises(UnsupportedInteractionError) as exc_info:
            dispatcher.dispatch(Interaction.model_validate({"type": 3, "id": "c"}))

        assert exc_info.value.interaction_type == 3

    def test_unknown_command_is_ephemeral(self) -> None:
        dispatcher, _, _ = _dispatcher()

        result = dispatcher.dispatch(_interaction("deploy"))

        assert result.response == {
            "type": 4,
            "data": {"content": "Unknown command: deploy", "flags": 64},
        }
        assert result.deferred is None

    def test_simple_command_missing_argument_is_ephemeral(self) -> None:
        dispatcher, directory, followup = _dispatcher()

        result = dispatcher.dispatch(_interaction("user"))

        assert result.response["type"] == 4
        assert result.response["data"]["content"] == "Missing required field(s): email"
        assert result.deferred is None
        assert directory.calls == []
        assert followup.sent == []

    def test_admin_without_subcommand_is_ephemeral(self) -> None:
        dispatcher, directory, followup = _dispatcher()

        result = dispatcher.dispatch(_interaction("admin"))

        assert result.response == {
            "type": 4,
            "data": {"content": "Subcommand required: /admin", "flags": 64},
        }
        assert result.deferred is None
        assert directory.calls == []
        assert followup.sent == []

    def test_valid_command_is_deferred_without_io(self) -> None:
        dispatcher, directory, _ = _dispatcher()

        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )

        assert result.response == {"type": 5}
        assert result.deferred is not None
        assert result.deferred.state is InteractionState.ACKNOWLEDGED
        assert result.deferred.correlation_id == "int-1"
        assert directory.calls == []

    def test_operation_name_has_no_values(self) -> None:
        dispatcher, _, _ = _dispatcher()

        result = dispatcher.dispatch(
            _interaction("admin", _admin("users", "get", user="ana@example.com"))
        )

        assert result.deferred is not None
        assert result.deferred.operation == "admin.users.get"


class TestDeferredTask:
    @pytest.mark.asyncio
    async def test_delivers_single_followup(self) -> None:
        dispatcher, directory, followup = _dispatcher()
        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )
        assert result.deferred is not None

        state = await result.deferred.run()

        assert state is InteractionState.DELIVERED
        assert directory.operation_names == ["get_user"]
        assert followup.sent == [
            (
                "reply-token",
                "Name: Ana Lima\nPrimary email: ana@example.com\nOrg unit: /\nSuspended: Yes",
            )
        ]

    @pytest.mark.asyncio
    async def test_second_run_is_noop(self) -> None:
        dispatcher, directory, followup = _dispatcher()
        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )
        assert result.deferred is not None

        await result.deferred.run()
        state = await result.deferred.run()

        assert state is InteractionState.DELIVERED
        assert len(followup.sent) == 1
        assert len(directory.calls) == 1

    @pytest.mark.asyncio
    async def test_concurrent_runs_send_single_followup(self) -> None:
        class SlowSender(FakeFollowupSender):
            async def send_followup(self, token: str, content: str) -> None:
                await asyncio.sleep(0.01)
                await super().send_followup(token, content)

        followup = SlowSender()
        dispatcher, directory, _ = _dispatcher(followup=followup)
        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )
        assert result.deferred is not None

        states = await asyncio.gather(
            result.deferred.run(), result.deferred.run(), return_exceptions=True
        )

        assert not any(isinstance(s, BaseException) for s in states)
        assert InteractionState.DELIVERED in states
        assert result.deferred.state is InteractionState.DELIVERED
        assert len(followup.sent) == 1
        assert len(directory.calls) == 1

    @pytest.mark.asyncio
    async def test_admin_validation_error_reported_in_followup(self) -> None:
        dispatcher, directory, followup = _dispatcher()
        result = dispatcher.dispatch(_interaction("admin", _admin("users", "get")))
        assert result.response == {"type": 5}
        assert result.deferred is not None

        state = await result.deferred.run()

        assert state is InteractionState.REPORTED
        assert directory.calls == []
        assert followup.sent == [("reply-token", "```\nMissing required field(s): user\n```")]

    @pytest.mark.asyncio
    async def test_upstream_error_reported_as_json(self) -> None:
        directory = FakeDirectoryClient(
            errors={"get_user": UpstreamApiError(404, '{"error":{"code":404}}')}
        )
        dispatcher, _, followup = _dispatcher(directory=directory)
        result = dispatcher.dispatch(
            _interaction("admin", _admin("users", "get", user="nobody@example.com"))
        )
        assert result.deferred is not None

        state = await result.deferred.run()

        assert state is InteractionState.REPORTED
        assert len(followup.sent) == 1
        assert followup.sent[0][1] == '```json\n{\n  "error": {\n    "code": 404\n  }\n}\n```'

    @pytest.mark.asyncio
    async def test_followup_failure_abandons_without_retry(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO)
        followup = FakeFollowupSender(error=FollowupDeliveryError("followup_status_404", status_code=404))
        dispatcher, _, _ = _dispatcher(followup=followup)
        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )
        assert result.deferred is not None

        state = await result.deferred.run()

        assert state is InteractionState.ABANDONED
        assert any(r.message == "deferred_task_abandoned" for r in caplog.records)
        assert not any(r.message == "deferred_task_delivered" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_correlation_id_bound_during_run(self) -> None:
        seen: list[str] = []

        class RecordingSender(FakeFollowupSender):
            async def send_followup(self, token: str, content: str) -> None:
                seen.append(get_correlation_id())
                await super().send_followup(token, content)

        dispatcher, _, _ = _dispatcher(followup=RecordingSender())
        result = dispatcher.dispatch(
            _interaction("user", [{"name": "email", "type": 3, "value": "ana@example.com"}])
        )
        assert result.deferred is not None

        await result.deferred.run()

        assert seen == ["int-1"]
        assert get_correlation_id() == ""

    def test_requires_exactly_one_of_command_or_failure(self) -> None:
        executor = DirectoryCommandExecutor(FakeDirectoryClient())
        common: dict[str, Any] = {
            "token": "t",
            "executor": executor,
            "followup_sender": FakeFollowupSender(),
            "fsm": create_fsm("x"),
            "correlation_id": "x",
            "operation": "user",
        }

        with pytest.raises(ValueError):
            DeferredTask(command=None, failure=None, **common)
        with pytest.raises(ValueError):
            DeferredTask(command=LookupUser(email="a@x"), failure=ValueError("x"), **common)
