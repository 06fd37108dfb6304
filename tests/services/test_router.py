"""Tests for ActionRouter."""

from __future__ import annotations

from typing import Literal

import pytest
from pydantic import BaseModel

from pvectl.domain.errors import PermissionDeniedError, ValidationFailure
from pvectl.services.context import ExecutionContext
from pvectl.services.result import ok
from pvectl.services.router import Action, ActionRouter, RouterDefinitionError


class ThingList(BaseModel):
    """List things."""

    action: Literal["list"]


class ThingDelete(BaseModel):
    """Delete a thing."""

    action: Literal["delete"]
    thing: str


class Untagged(BaseModel):
    thing: str


class WrongTag(BaseModel):
    action: Literal["remove"]


class _Recorder:
    def __init__(self) -> None:
        self.seen: list[tuple[str, BaseModel]] = []

    def handler(self, name: str):
        def run(context, args):
            self.seen.append((name, args))
            return ok(name)

        return run


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


@pytest.fixture
def router(recorder: _Recorder) -> ActionRouter:
    return ActionRouter(
        "action",
        [
            Action("list", ThingList, recorder.handler("list"), label="List Things"),
            Action(
                "delete", ThingDelete, recorder.handler("delete"), label="Delete Thing",
                elevated=True,
            ),
        ],
    )


class TestConstruction:
    def test_empty_table_rejected(self) -> None:
        with pytest.raises(RouterDefinitionError, match="at least one"):
            ActionRouter("action", [])

    def test_duplicate_arm_rejected(self) -> None:
        run = _Recorder().handler("x")
        with pytest.raises(RouterDefinitionError, match="Duplicate action 'list'"):
            ActionRouter(
                "action",
                [
                    Action("list", ThingList, run, label="a"),
                    Action("list", ThingList, run, label="b"),
                ],
            )

    def test_schema_without_discriminator_rejected(self) -> None:
        with pytest.raises(RouterDefinitionError, match="has no 'action' field"):
            ActionRouter("action", [Action("list", Untagged, _Recorder().handler("x"), label="a")])

    def test_literal_must_match_arm_name(self) -> None:
        with pytest.raises(RouterDefinitionError, match="must be Literal"):
            ActionRouter(
                "action", [Action("delete", WrongTag, _Recorder().handler("x"), label="a")]
            )

    def test_single_arm_schema_is_the_model(self) -> None:
        arm = Action("list", ThingList, _Recorder().handler("x"), label="a")
        router = ActionRouter("action", [arm])
        assert router.schema is ThingList

    def test_table_accessors(self, router: ActionRouter) -> None:
        assert router.actions == ("list", "delete")
        assert router.elevated is False
        assert router.arm("delete").elevated is True
        assert [arm.name for arm in router.arms()] == ["list", "delete"]


class TestRoute:
    def test_routes_to_selected_arm_only(
        self, router: ActionRouter, recorder: _Recorder, elevated_context: ExecutionContext
    ) -> None:
        envelope = router.route(elevated_context, ThingDelete(action="delete", thing="t1"))
        assert envelope.text == "delete"
        assert [name for name, _ in recorder.seen] == ["delete"]

    def test_elevated_arm_is_gated(
        self, router: ActionRouter, recorder: _Recorder, context: ExecutionContext
    ) -> None:
        with pytest.raises(PermissionDeniedError, match="Delete Thing"):
            router.route(context, ThingDelete(action="delete", thing="t1"))
        assert recorder.seen == []

    def test_basic_arm_not_gated(
        self, router: ActionRouter, recorder: _Recorder, context: ExecutionContext
    ) -> None:
        assert router.route(context, ThingList(action="list")).text == "list"

    def test_raw_mapping_is_validated_first(
        self, router: ActionRouter, context: ExecutionContext
    ) -> None:
        assert router.route(context, {"action": "list"}).text == "list"
        with pytest.raises(ValidationFailure):
            router.route(context, {"action": "delete"})

    def test_label_for(self, router: ActionRouter) -> None:
        assert router.label_for({"action": "delete"}) == "Delete Thing"
        assert router.label_for(ThingList(action="list")) == "List Things"
        assert router.label_for({"action": ["unhashable"]}) is None
        assert router.label_for({}) is None


class TestJsonSchema:
    def test_shape(self, router: ActionRouter) -> None:
        schema = router.json_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["action"]
        assert schema["properties"]["action"]["enum"] == ["list", "delete"]
        assert len(schema["oneOf"]) == 2

    def test_variants_carry_description_and_elevation(self, router: ActionRouter) -> None:
        list_variant, delete_variant = router.json_schema()["oneOf"]
        assert list_variant["description"] == "List things."
        assert "x-requires-elevated" not in list_variant
        assert delete_variant["x-requires-elevated"] is True
        assert "thing" in delete_variant["properties"]
