#!/usr/bin/env python3
"""Envia uma push notification de teste via FCM HTTP v1.

Uso:
    python scripts/send_test_message.py --token <device-token> --title Oi --body Teste
    python scripts/send_test_message.py --topic news --body Teste --send

Padrao: dry-run (validate_only, nada e entregue ao dispositivo).
Credenciais: FCM_SERVICE_ACCOUNT_JSON ou GOOGLE_APPLICATION_CREDENTIALS.
"""

from __future__ import annotations

import argparse
import asyncio

from fcm_push import FcmClient, Message, Notification, create_fcm_client
from fcm_push.config.logging import configure_logging


def data_pair(item: str) -> tuple[str, str]:
    """Converte CHAVE=VALOR em par; o valor pode conter "=".

    Raises:
        argparse.ArgumentTypeError: Se faltar "=" ou a chave for vazia
    """
    key, sep, value = item.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"esperado CHAVE=VALOR, recebido {item!r}")
    return key, value


def build_message(args: argparse.Namespace) -> Message:
    # Pares em ordem: chave repetida vira DuplicateKeyError na codificação.
    data = list(args.data) if args.data else None
    return Message(
        token=args.token,
        topic=args.topic,
        notification=Notification(title=args.title, body=args.body),
        data=data,
        dry_run=not args.send,
    )


async def send(args: argparse.Namespace) -> str:
    client: FcmClient = create_fcm_client()
    async with client:
        outcome = await client.send(build_message(args))
    return outcome.message_id or ""


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--token", default=None, help="Device token de destino.")
    target.add_argument("--topic", default=None, help="Topico de destino.")
    parser.add_argument("--title", default="fcm_push", help="Titulo da notificacao.")
    parser.add_argument("--body", default="Mensagem de teste", help="Corpo da notificacao.")
    parser.add_argument(
        "--data",
        action="append",
        type=data_pair,
        metavar="CHAVE=VALOR",
        help="Par de dados customizado. Pode ser repetido.",
    )
    parser.add_argument(
        "--send",
        action="store_true",
        help="Entrega de verdade. Sem esta flag executa dry-run.",
    )
    parser.add_argument("--log-level", default="INFO", help="Nivel de log.")
    return parser.parse_args(argv)


def main() -> None:
    args = parse_args()
    configure_logging(level=args.log_level)
    message_id = asyncio.run(send(args))
    mode = "send" if args.send else "dry-run"
    print(f"[{mode}] message_id={message_id}")


if __name__ == "__main__":
    main()
