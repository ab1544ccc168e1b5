"""Testes da codificação de Message no corpo do endpoint messages:send."""

from __future__ import annotations

import itertools
import json

import pytest

from fcm_push.domain import (
    AndroidConfig,
    AndroidNotification,
    AndroidPriority,
    ApnsConfig,
    FcmOptions,
    Message,
    Notification,
    WebpushConfig,
    WebpushUrgency,
)
from fcm_push.payload_builders import MessageEncoder, build_message_payload, encode
from fcm_push.payload_builders.base import format_duration
from fcm_push.utils.errors import (
    AmbiguousTargetError,
    DuplicateKeyError,
    EncodeError,
    InvalidFieldError,
    PayloadTooLargeError,
)

TARGETS = {"token": "device-abc", "topic": "news", "condition": "'a' in topics"}


def _decode(message: Message) -> dict:
    return json.loads(encode(message))


class TestTarget:
    """Testes do destino único."""

    @pytest.mark.parametrize("name", sorted(TARGETS))
    def test_single_target(self, name: str) -> None:
        body = _decode(Message(**{name: TARGETS[name]}))
        assert body == {"message": {name: TARGETS[name]}}

    def test_no_target_is_ambiguous(self) -> None:
        with pytest.raises(AmbiguousTargetError) as exc_info:
            encode(Message(notification=Notification(title="oi")))
        assert exc_info.value.targets == ()

    @pytest.mark.parametrize(
        "names",
        [combo for size in (2, 3) for combo in itertools.combinations(sorted(TARGETS), size)],
    )
    def test_multiple_targets_are_ambiguous(self, names: tuple[str, ...]) -> None:
        message = Message(**{name: TARGETS[name] for name in names})
        with pytest.raises(AmbiguousTargetError) as exc_info:
            encode(message)
        assert set(exc_info.value.targets) == set(names)

    def test_empty_string_counts_as_unset(self) -> None:
        body = _decode(Message(token="", topic="news"))
        assert body["message"] == {"topic": "news"}

    def test_topic_prefix_is_stripped(self) -> None:
        assert _decode(Message(topic="/topics/news"))["message"] == {"topic": "news"}

    @pytest.mark.parametrize("topic", ["com espaço", "news\n", "/topics/news\n", "a/b"])
    def test_invalid_topic_name(self, topic: str) -> None:
        with pytest.raises(InvalidFieldError):
            encode(Message(topic=topic))

    def test_ambiguous_is_encode_error(self) -> None:
        with pytest.raises(EncodeError):
            encode(Message())


class TestOmitsAbsentFields:
    """Campos não definidos não aparecem no corpo."""

    def test_minimal_message(self) -> None:
        assert _decode(Message(token="t")) == {"message": {"token": "t"}}

    def test_partial_notification(self) -> None:
        body = _decode(Message(token="t", notification=Notification(title="Olá")))
        assert body["message"]["notification"] == {"title": "Olá"}

    def test_empty_sections_are_dropped(self) -> None:
        message = Message(
            token="t",
            notification=Notification(),
            data={},
            android=AndroidConfig(),
            apns=ApnsConfig(),
            webpush=WebpushConfig(),
            fcm_options=FcmOptions(),
        )
        assert _decode(message) == {"message": {"token": "t"}}

    def test_dry_run_sets_validate_only(self) -> None:
        body = _decode(Message(token="t", dry_run=True))
        assert body["validate_only"] is True

    def test_no_validate_only_by_default(self) -> None:
        assert "validate_only" not in _decode(Message(token="t"))


class TestFullMessage:
    """Mensagem com todas as seções."""

    def test_all_sections(self) -> None:
        message = Message(
            topic="promo",
            notification=Notification(title="T", body="B", image="https://img/x.png"),
            data={"order_id": "42", "kind": "promo"},
            android=AndroidConfig(
                collapse_key="promo",
                priority=AndroidPriority.HIGH,
                ttl_seconds=3600,
                restricted_package_name="com.example.app",
                data={"android_only": "1"},
                notification=AndroidNotification(channel_id="promo", color="#ff0000"),
                direct_boot_ok=True,
            ),
            apns=ApnsConfig(
                priority=10,
                collapse_id="promo",
                expiration=1700000000,
                headers={"apns-push-type": "alert"},
                payload={"aps": {"badge": 1}},
            ),
            webpush=WebpushConfig(
                ttl_seconds=300,
                urgency=WebpushUrgency.HIGH,
                data={"web": "1"},
                notification={"icon": "/icon.png"},
                link="https://example.com/promo",
            ),
            fcm_options=FcmOptions(analytics_label="campanha_x"),
        )

        body = _decode(message)["message"]

        assert list(body) == [
            "topic",
            "notification",
            "data",
            "android",
            "apns",
            "webpush",
            "fcm_options",
        ]
        assert body["data"] == {"order_id": "42", "kind": "promo"}
        assert body["android"] == {
            "collapse_key": "promo",
            "priority": "high",
            "ttl": "3600s",
            "restricted_package_name": "com.example.app",
            "data": {"android_only": "1"},
            "notification": {"color": "#ff0000", "channel_id": "promo"},
            "direct_boot_ok": True,
        }
        assert body["apns"] == {
            "headers": {
                "apns-priority": "10",
                "apns-collapse-id": "promo",
                "apns-expiration": "1700000000",
                "apns-push-type": "alert",
            },
            "payload": {"aps": {"badge": 1}},
        }
        assert body["webpush"] == {
            "headers": {"TTL": "300", "Urgency": "high"},
            "data": {"web": "1"},
            "notification": {"icon": "/icon.png"},
            "fcm_options": {"link": "https://example.com/promo"},
        }
        assert body["fcm_options"] == {"analytics_label": "campanha_x"}

    def test_data_values_are_opaque(self) -> None:
        data = {"json": '{"a": 1}', "vazio": "", "unicode": "ação 🚀"}
        body = _decode(Message(token="t", data=data))
        assert body["message"]["data"] == data


class TestDuplicateKeys:
    """Chaves repetidas são rejeitadas, nunca sobrescritas."""

    def test_duplicate_data_pair(self) -> None:
        message = Message(token="t", data=[("k", "1"), ("k", "2")])
        with pytest.raises(DuplicateKeyError) as exc_info:
            encode(message)
        assert exc_info.value.key == "k"
        assert exc_info.value.field == "data"

    def test_duplicate_header_case_insensitive(self) -> None:
        message = Message(
            token="t",
            webpush=WebpushConfig(headers=[("Topic", "a"), ("topic", "b")]),
        )
        with pytest.raises(DuplicateKeyError):
            encode(message)

    def test_explicit_field_conflicts_with_raw_header(self) -> None:
        message = Message(
            token="t",
            apns=ApnsConfig(priority=5, headers={"APNS-PRIORITY": "10"}),
        )
        with pytest.raises(DuplicateKeyError, match="apns-priority"):
            encode(message)

    def test_non_string_data_value(self) -> None:
        with pytest.raises(InvalidFieldError):
            encode(Message(token="t", data={"count": 3}))


class TestDurations:
    """Testes de format_duration e TTLs."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0s"),
            (3600, "3600s"),
            (1.5, "1.5s"),
            (0.000000001, "0.000000001s"),
            (1e-10, "0s"),
        ],
    )
    def test_format(self, seconds: float, expected: str) -> None:
        assert format_duration("ttl", seconds) == expected

    @pytest.mark.parametrize("seconds", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_is_rejected(self, seconds: float) -> None:
        with pytest.raises(InvalidFieldError, match="finito"):
            format_duration("ttl", seconds)

    def test_nan_android_ttl(self) -> None:
        with pytest.raises(InvalidFieldError):
            encode(Message(token="t", android=AndroidConfig(ttl_seconds=float("nan"))))

    def test_negative_android_ttl(self) -> None:
        with pytest.raises(InvalidFieldError):
            encode(Message(token="t", android=AndroidConfig(ttl_seconds=-1)))

    def test_negative_webpush_ttl(self) -> None:
        with pytest.raises(InvalidFieldError):
            encode(Message(token="t", webpush=WebpushConfig(ttl_seconds=-1)))


class TestMessageEncoder:
    """Testes do MessageEncoder."""

    def test_deterministic_bytes(self) -> None:
        message = Message(token="t", data={"b": "2", "a": "1"}, notification=Notification(title="x"))
        assert encode(message) == encode(message)
        assert encode(message) == (
            b'{"message":{"token":"t","notification":{"title":"x"},"data":{"b":"2","a":"1"}}}'
        )

    def test_non_ascii_kept_as_utf8(self) -> None:
        body = encode(Message(token="t", notification=Notification(title="ação")))
        assert "ação".encode() in body

    def test_size_limit(self) -> None:
        encoder = MessageEncoder(max_body_bytes=64)
        with pytest.raises(PayloadTooLargeError) as exc_info:
            encoder.encode(Message(token="t", data={"blob": "x" * 100}))
        assert exc_info.value.limit == 64
        assert exc_info.value.size > 64

    def test_build_payload_matches_encoded(self) -> None:
        message = Message(condition="'a' in topics", dry_run=True)
        assert json.loads(encode(message)) == build_message_payload(message)


# Seção opcional -> (valor em Message, valor esperado no corpo decodificado)
OPTIONAL_SECTIONS = {
    "notification": (Notification(title="T", body="B"), {"title": "T", "body": "B"}),
    "data": ({"k": "v"}, {"k": "v"}),
    "android": (
        AndroidConfig(priority=AndroidPriority.HIGH, ttl_seconds=60),
        {"priority": "high", "ttl": "60s"},
    ),
    "apns": (ApnsConfig(priority=10), {"headers": {"apns-priority": "10"}}),
    "webpush": (
        WebpushConfig(urgency=WebpushUrgency.LOW),
        {"headers": {"Urgency": "low"}},
    ),
    "fcm_options": (FcmOptions(analytics_label="l"), {"analytics_label": "l"}),
}


class TestRoundTrip:
    """Decodificar o corpo devolve o conteúdo da Message em toda combinação."""

    @pytest.mark.parametrize(
        "present",
        [
            tuple(name for name, keep in zip(OPTIONAL_SECTIONS, mask) if keep)
            for mask in itertools.product((False, True), repeat=len(OPTIONAL_SECTIONS))
        ],
        ids=lambda present: "+".join(present) or "vazio",
    )
    @pytest.mark.parametrize("dry_run", [False, True])
    def test_optional_section_combinations(self, present: tuple[str, ...], dry_run: bool) -> None:
        kwargs = {name: OPTIONAL_SECTIONS[name][0] for name in present}
        message = Message(token="t", dry_run=dry_run, **kwargs)

        decoded = json.loads(encode(message))

        expected = {"token": "t", **{name: OPTIONAL_SECTIONS[name][1] for name in present}}
        assert decoded["message"] == expected
        assert decoded == build_message_payload(message)
        for name in OPTIONAL_SECTIONS:
            assert (name in decoded["message"]) == (name in present)
        assert decoded.get("validate_only", False) is dry_run
