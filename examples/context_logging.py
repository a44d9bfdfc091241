"""Minimal example sending context-rich records to a local GELF collector."""

from __future__ import annotations

import time

import gelfsend


def main() -> None:
    gelfsend.configure(
        {
            "target": {
                "host": "127.0.0.1",
                "port": 12201,
                "additional_fields": {"app": "gelfsend-demo"},
            },
            "handler": {"level": "INFO", "add_extended_information": True},
            "logging": {"root_level": "INFO"},
        }
    )

    logger = gelfsend.get_context_logger("examples.orders", env="dev")
    logger.push("checkout")
    for order_id in range(1, 4):
        logger.add_context(order_id=order_id, total=round(order_id * 19.99, 2))
        logger.info("processed order")
        time.sleep(0.1)
    logger.pop()

    gelfsend.shutdown()


if __name__ == "__main__":
    main()
