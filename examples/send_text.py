"""Scan for a BLE peripheral and send it a line of text.

Usage:
    uv run python examples/send_text.py --name "Even G1_L" "Hello, Even G1!"
    uv run python examples/send_text.py --address AA:BB:CC:DD:EE:FF --wildcard "hi"
    uv run python examples/send_text.py --scan-only --duration 10
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime

from bletext import (
    BleTextClient,
    ProtocolConfig,
    ScannedPeripheral,
    TextEncoding,
)


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _print_peripherals(peripherals: tuple[ScannedPeripheral, ...]) -> None:
    print(f"\n[{_timestamp()}] {len(peripherals)} peripheral(s):")
    for index, peripheral in enumerate(peripherals):
        print(f"  {index:2d}. {peripheral.display_name} ({peripheral.address}) rssi={peripheral.rssi}")


def _pick(
        peripherals: tuple[ScannedPeripheral, ...],
        address: str | None,
) -> ScannedPeripheral | None:
    if address is not None:
        return next((p for p in peripherals if p.address.lower() == address.lower()), None)
    return peripherals[0] if peripherals else None


def _protocol(args: argparse.Namespace) -> ProtocolConfig:
    base = ProtocolConfig.WILDCARD if args.wildcard else ProtocolConfig.NUS
    return ProtocolConfig(
        service_uuid=args.service or base.service_uuid,
        write_characteristic_uuid=args.characteristic or base.write_characteristic_uuid,
        chunk_overhead_bytes=args.overhead,
        use_write_without_response=not args.with_response,
        text_encoding=TextEncoding(args.encoding),
        prepend_length_header=args.length_header,
    )


async def run(args: argparse.Namespace) -> int:
    """Scan, connect to the chosen peripheral and send the text."""
    async with BleTextClient(connect_timeout=args.timeout) as client:
        client.status_messages.subscribe(lambda msg: print(f"[{_timestamp()}] {msg}"))

        if not client.has_required_permissions():
            print("Bluetooth permissions required")
            return 1

        if not await client.start_scan(name_filter=args.name, service_filter=args.scan_service):
            return 1
        await asyncio.sleep(args.duration)
        await client.stop_scan()

        peripherals = client.scan_results.value
        _print_peripherals(peripherals)
        if args.scan_only:
            return 0

        peripheral = _pick(peripherals, args.address)
        if peripheral is None:
            print("No matching peripheral found")
            return 1

        if not await client.connect(peripheral, _protocol(args)):
            return 1

        endpoint = client.endpoint
        if endpoint is not None:
            print(
                f"Writing to {endpoint.characteristic.uuid} "
                f"(service {endpoint.service.uuid}, {endpoint.tier.name}, mtu={client.mtu})"
            )

        ok = await client.send_text(args.text or "")
        return 0 if ok else 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send text to a BLE peripheral over a writable GATT characteristic."
    )
    parser.add_argument("text", nargs="?", help="Text to send")
    parser.add_argument("--name", help="Only consider peripherals advertising this exact name")
    parser.add_argument("--address", help="Connect to this address (default: first found)")
    parser.add_argument("--scan-service", help="Only consider peripherals advertising this service UUID")
    parser.add_argument("--scan-only", action="store_true", help="List peripherals and exit")
    parser.add_argument(
        "--duration",
        type=float,
        default=5.0,
        help="Scan duration in seconds. Default: 5",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Seconds to wait for a usable connection. Default: 30",
    )
    parser.add_argument(
        "--wildcard",
        action="store_true",
        help="Write to the first writable characteristic instead of Nordic UART",
    )
    parser.add_argument("--service", help="Override the target service UUID")
    parser.add_argument("--characteristic", help="Override the target write characteristic UUID")
    parser.add_argument("--overhead", type=int, default=3, help="Per-write framing overhead. Default: 3")
    parser.add_argument(
        "--with-response",
        action="store_true",
        help="Use ATT Write Request instead of Write Command",
    )
    parser.add_argument(
        "--encoding",
        choices=[encoding.value for encoding in TextEncoding],
        default=TextEncoding.UTF_8.value,
        help="Text encoding. Default: utf-8",
    )
    parser.add_argument(
        "--length-header",
        action="store_true",
        help="Prefix the payload with its 2-byte big-endian length",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        raise SystemExit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
