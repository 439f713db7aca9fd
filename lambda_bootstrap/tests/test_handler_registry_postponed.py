"""Shape resolution for handlers written with postponed annotations."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Callable

from pydantic import BaseModel

from lambda_bootstrap.services.handler import HandlerVariant
from lambda_bootstrap.services.handler_registry import HandlerRegistry, inspect_handler

if TYPE_CHECKING:
    from lambda_bootstrap.models.context import InvocationContext as LambdaContext


class Order(BaseModel):
    order_id: str


class Receipt(BaseModel):
    order_id: str
    accepted: bool


def sync_typed(event: Order, context: LambdaContext) -> Receipt:
    return Receipt(order_id=event.order_id, accepted=True)


def async_typed(
    event: Order, context: LambdaContext, completion: Callable[[Receipt], None]
) -> None:
    completion(Receipt(order_id=event.order_id, accepted=False))


def untyped(event: dict, context: LambdaContext) -> dict:
    return {"seen": event["order_id"]}


class TestPostponedAnnotations:
    def test_resolvable_annotations_survive_type_checking_only_context(self):
        is_async, input_type, output_type = inspect_handler(sync_typed)

        assert is_async is False
        assert input_type is Order
        assert output_type is Receipt

    def test_sync_typed_handler_decodes_into_model(self, context):
        handler = HandlerRegistry().register("h", sync_typed)

        result = handler.apply(b'{"order_id": "o-1"}', context)

        assert handler.variant is HandlerVariant.SYNC_TYPED
        assert json.loads(result.payload) == {"order_id": "o-1", "accepted": True}

    def test_async_typed_handler_keeps_completion_type(self, context):
        handler = HandlerRegistry().register("h", async_typed)

        result = handler.apply(b'{"order_id": "o-2"}', context)

        assert handler.variant is HandlerVariant.ASYNC_TYPED
        assert handler.codec.output_type is Receipt
        assert json.loads(result.payload) == {"order_id": "o-2", "accepted": False}

    def test_dict_annotation_stays_untyped(self, context):
        handler = HandlerRegistry().register("h", untyped)

        result = handler.apply(b'{"order_id": "o-3"}', context)

        assert handler.variant is HandlerVariant.SYNC_UNTYPED
        assert json.loads(result.payload) == {"seen": "o-3"}
