from __future__ import annotations

import asyncio

from shortybot.core.errors import (
    GENERIC_ERROR_REPLY,
    ErrorTranslator,
    InvalidOutcomeError,
    OtherError,
    StructuredApiError,
    translate_error,
)
from shortybot.core.guards import has_role, is_broadcaster, is_moderator


class TestPermissionGate:
    def test_broadcaster(self, make_ctx):
        ctx, _ = make_ctx(role="broadcaster")
        assert is_broadcaster(ctx) is True
        assert is_moderator(ctx) is True

    def test_moderator(self, make_ctx):
        ctx, _ = make_ctx(role="moderator")
        assert is_broadcaster(ctx) is False
        assert is_moderator(ctx) is True

    def test_regular_chatter(self, make_ctx):
        ctx, _ = make_ctx(role="viewer")
        assert is_broadcaster(ctx) is False
        assert is_moderator(ctx) is False
        assert has_role(ctx, "everyone") is True


class TestTranslateError:
    def test_structured_dict_body(self):
        error = StructuredApiError(
            400, {"error": "Bad Request", "status": 400, "message": "prediction already active"}
        )
        assert translate_error(error) == "prediction already active"

    def test_structured_json_text_body(self):
        error = StructuredApiError(403, '{"status": 403, "message": "Missing scope"}')
        assert translate_error(error) == "Missing scope"

    def test_structured_body_without_message(self):
        assert translate_error(StructuredApiError(500, {"error": "Internal"})) == GENERIC_ERROR_REPLY

    def test_structured_body_not_json(self):
        assert translate_error(StructuredApiError(502, "<html>bad gateway</html>")) == (
            GENERIC_ERROR_REPLY
        )

    def test_other_errors_are_generic(self):
        assert translate_error(OtherError("socket closed")) == GENERIC_ERROR_REPLY
        assert translate_error(RuntimeError("boom")) == GENERIC_ERROR_REPLY

    def test_validation_error_carries_own_reply(self):
        error = InvalidOutcomeError("7", 2)
        assert error.reply.startswith("Invalid outcome!")


def test_error_translator_replies_against_message_id(caplog):
    sent: list[tuple[str, str]] = []

    async def reply(text: str, message_id: str) -> None:
        sent.append((text, message_id))

    translator = ErrorTranslator(reply)
    with caplog.at_level("ERROR", logger="ErrorTranslator"):
        asyncio.run(translator.report(StructuredApiError(400, {"message": "nope"}), "m-42"))
        asyncio.run(translator.report(ValueError("x"), "m-43"))

    assert sent == [("nope", "m-42"), (GENERIC_ERROR_REPLY, "m-43")]
    assert len([r for r in caplog.records if r.name == "ErrorTranslator"]) == 2


def test_error_translator_survives_failed_reply():
    async def reply(text: str, message_id: str) -> None:
        raise OtherError("chat down")

    asyncio.run(ErrorTranslator(reply).report(RuntimeError("boom"), "m-1"))
