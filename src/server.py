"""Protean Engine runner for the storefront domain.

Starts the Engine that processes events asynchronously when the domain runs
with ``event_processing = "async"`` (the production overlay): the stock
cache invalidator, the open-checkout refresher and the order webhook
notifier.

Usage:
    PROTEAN_ENV=production python src/server.py
"""

import asyncio

from protean.server.engine import Engine


def _get_domain():
    from storefront.domain import storefront

    storefront.init()
    return storefront


async def run():
    engine = Engine(_get_domain())
    await engine.run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
