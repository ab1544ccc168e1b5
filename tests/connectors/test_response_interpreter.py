"""Testes do ResponseInterpreter e do parsing de erros FCM."""

from __future__ import annotations

import httpx
import pytest

from fcm_push.connectors import ErrorCodeCatalog, ResponseInterpreter, parse_fcm_error
from fcm_push.domain import FailureKind, SendFailure, SendOutcome
from fcm_push.utils.errors import (
    AmbiguousTargetError,
    AuthNetworkError,
    CredentialInvalidError,
    InvalidRequestError,
    MalformedResponseError,
    RetryExhaustedError,
    UnauthorizedError,
)


def _v1_error(code: str, status: str = "INVALID_ARGUMENT") -> dict:
    return {
        "error": {
            "code": 400,
            "message": "mensagem do servidor",
            "status": status,
            "details": [
                {"@type": "type.googleapis.com/google.rpc.BadRequest", "fieldViolations": []},
                {
                    "@type": "type.googleapis.com/google.firebase.fcm.v1.FcmError",
                    "errorCode": code,
                },
            ],
        }
    }


class TestParseFcmError:
    """Testes de parse_fcm_error."""

    def test_v1_error_code_from_details(self) -> None:
        error = parse_fcm_error(_v1_error("UNREGISTERED", status="NOT_FOUND"))
        assert error is not None
        assert error.code == "UNREGISTERED"
        assert error.status == "NOT_FOUND"
        assert error.message == "mensagem do servidor"

    def test_falls_back_to_status(self) -> None:
        error = parse_fcm_error({"error": {"status": "RESOURCE_EXHAUSTED", "message": "x"}})
        assert error is not None
        assert error.code == "RESOURCE_EXHAUSTED"

    def test_legacy_string_error(self) -> None:
        error = parse_fcm_error({"error": "NotRegistered"})
        assert error is not None
        assert error.code == "NotRegistered"

    @pytest.mark.parametrize("data", [None, [], {}, {"name": "x"}, {"error": {}}])
    def test_no_error(self, data) -> None:
        assert parse_fcm_error(data) is None


class TestErrorCodeCatalog:
    """Testes da tabela de códigos."""

    @pytest.mark.parametrize(
        ("code", "kind"),
        [
            ("UNREGISTERED", FailureKind.UNREGISTERED),
            ("SENDER_ID_MISMATCH", FailureKind.MISMATCHED_SENDER_IDENTITY),
            ("QUOTA_EXCEEDED", FailureKind.QUOTA_EXCEEDED),
            ("THIRD_PARTY_AUTH_ERROR", FailureKind.THIRD_PARTY_AUTH),
            ("MismatchSenderId", FailureKind.MISMATCHED_SENDER_IDENTITY),
            ("MessageTooBig", FailureKind.MESSAGE_TOO_BIG),
        ],
    )
    def test_known_codes(self, code: str, kind: FailureKind) -> None:
        assert ErrorCodeCatalog().classify(code) is kind

    def test_unknown_code(self) -> None:
        catalog = ErrorCodeCatalog()
        assert catalog.classify("SOME_NEW_CODE") is FailureKind.UNKNOWN
        assert "SOME_NEW_CODE" not in catalog

    def test_extra_codes_extend_table(self) -> None:
        catalog = ErrorCodeCatalog({"SOME_NEW_CODE": FailureKind.UNAVAILABLE})
        assert catalog.classify("SOME_NEW_CODE") is FailureKind.UNAVAILABLE
        assert catalog.classify("UNREGISTERED") is FailureKind.UNREGISTERED

    def test_extra_codes_override_defaults(self) -> None:
        catalog = ErrorCodeCatalog({"INTERNAL": FailureKind.UNAVAILABLE})
        assert catalog.classify("INTERNAL") is FailureKind.UNAVAILABLE


class TestInterpret:
    """Testes de interpret (respostas 2xx)."""

    def test_extracts_name(self) -> None:
        response = httpx.Response(200, json={"name": "projects/p/messages/1"})
        assert ResponseInterpreter().interpret(response) == SendOutcome.succeeded(
            "projects/p/messages/1"
        )

    @pytest.mark.parametrize("body", [b"", b"[]", b'{"name": ""}', b'{"name": 5}'])
    def test_malformed(self, body: bytes) -> None:
        with pytest.raises(MalformedResponseError) as exc_info:
            ResponseInterpreter().interpret(httpx.Response(200, content=body))
        assert exc_info.value.failure.kind is FailureKind.UNKNOWN


class TestFailureFromResponse:
    """Testes de failure_from_response."""

    def test_unknown_code_is_preserved(self) -> None:
        """Código fora da tabela vira UNKNOWN com o código bruto."""
        response = httpx.Response(400, json=_v1_error("SOME_NEW_CODE"))

        failure = ResponseInterpreter().failure_from_response(response)

        assert failure.kind is FailureKind.UNKNOWN
        assert failure.code == "SOME_NEW_CODE"
        assert failure.is_unknown
        assert failure.status_code == 400

    def test_retry_after_is_carried(self) -> None:
        response = httpx.Response(429, json=_v1_error("QUOTA_EXCEEDED"))

        failure = ResponseInterpreter().failure_from_response(response, retry_after_seconds=30.0)

        assert failure.kind is FailureKind.QUOTA_EXCEEDED
        assert failure.retry_after_seconds == 30.0

    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            (429, FailureKind.QUOTA_EXCEEDED),
            (500, FailureKind.INTERNAL),
            (503, FailureKind.UNAVAILABLE),
            (418, FailureKind.UNKNOWN),
        ],
    )
    def test_empty_body_uses_status(self, status: int, kind: FailureKind) -> None:
        failure = ResponseInterpreter().failure_from_response(httpx.Response(status))
        assert failure.kind is kind
        assert failure.code == f"HTTP_{status}"

    def test_custom_catalog(self) -> None:
        interpreter = ResponseInterpreter(ErrorCodeCatalog({"SOME_NEW_CODE": FailureKind.INTERNAL}))
        response = httpx.Response(400, json=_v1_error("SOME_NEW_CODE"))
        assert interpreter.failure_from_response(response).kind is FailureKind.INTERNAL

    def test_failure_from_exception(self) -> None:
        interpreter = ResponseInterpreter()
        timeout = interpreter.failure_from_exception(TimeoutError(), timed_out=True)
        network = interpreter.failure_from_exception(OSError(), timed_out=False)
        assert (timeout.kind, timeout.code) == (FailureKind.UNAVAILABLE, "TIMEOUT")
        assert (network.kind, network.code) == (FailureKind.UNAVAILABLE, "NETWORK_ERROR")


class TestAssembleBatch:
    """Testes de assemble_batch."""

    def test_alignment_with_middle_failure(self) -> None:
        """[A, B, C] com B falhando: índice 1 falho, 0 e 2 ok."""
        failure = SendFailure(kind=FailureKind.UNREGISTERED, code="UNREGISTERED", status_code=404)
        results = [
            SendOutcome.succeeded("projects/p/messages/a"),
            InvalidRequestError("rejeitado", status_code=404, failure=failure),
            SendOutcome.succeeded("projects/p/messages/c"),
        ]

        batch = ResponseInterpreter().assemble_batch(results)

        assert len(batch) == 3
        assert batch[0].success
        assert not batch[1].success
        assert batch[1].failure == failure
        assert batch[2].success
        assert batch[2].message_id == "projects/p/messages/c"
        assert batch.failed_indices() == [1]
        assert (batch.success_count, batch.failure_count) == (2, 1)

    def test_unknown_code_entry(self) -> None:
        failure = SendFailure(kind=FailureKind.UNKNOWN, code="SOME_NEW_CODE")
        batch = ResponseInterpreter().assemble_batch(
            [InvalidRequestError("x", failure=failure)]
        )
        assert batch[0].failure.code == "SOME_NEW_CODE"
        assert batch[0].failure.is_unknown

    def test_per_target_transport_errors_become_entries(self) -> None:
        last = SendFailure(kind=FailureKind.UNAVAILABLE, code="HTTP_503", status_code=503)
        unauthorized = SendFailure(kind=FailureKind.UNAUTHORIZED, code="HTTP_401")
        malformed = SendFailure(kind=FailureKind.UNKNOWN, code="MALFORMED_RESPONSE")
        batch = ResponseInterpreter().assemble_batch(
            [
                RetryExhaustedError(4, last),
                UnauthorizedError("401", failure=unauthorized),
                MalformedResponseError("sem name", failure=malformed),
            ]
        )
        assert [outcome.failure.code for outcome in batch] == [
            "HTTP_503",
            "HTTP_401",
            "MALFORMED_RESPONSE",
        ]

    def test_auth_error_escalates_when_every_target_failed_auth(self) -> None:
        with pytest.raises(CredentialInvalidError):
            ResponseInterpreter().assemble_batch(
                [CredentialInvalidError("chave revogada"), CredentialInvalidError("chave revogada")]
            )

    def test_auth_error_after_deliveries_becomes_entry(self) -> None:
        """Com destinos já entregues, AuthError não descarta os message_ids."""
        batch = ResponseInterpreter().assemble_batch(
            [
                SendOutcome.succeeded("projects/p/messages/a"),
                CredentialInvalidError("chave revogada"),
                AuthNetworkError("token endpoint fora"),
            ]
        )

        assert batch[0].message_id == "projects/p/messages/a"
        assert batch[1].failure.code == "AUTH_ERROR"
        assert batch[1].failure.kind is FailureKind.UNAUTHORIZED
        assert batch[1].failure.message == "CredentialInvalidError"
        assert batch[2].failure.kind is FailureKind.UNAVAILABLE
        assert batch.failed_indices() == [1, 2]

    def test_encode_error_escalates(self) -> None:
        with pytest.raises(AmbiguousTargetError):
            ResponseInterpreter().assemble_batch([AmbiguousTargetError(())])
