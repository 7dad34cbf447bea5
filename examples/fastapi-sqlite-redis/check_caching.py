#!/usr/bin/env python3
"""Script to verify caching against a running example app."""

import asyncio

import httpx

BASE_URL = "http://localhost:8000"
PRODUCTS_URL = f"{BASE_URL}/api/products"


async def main():
    async with httpx.AsyncClient() as client:
        await client.delete(PRODUCTS_URL)

        first = await client.get(PRODUCTS_URL, params={"take": 20})
        print("first:", first.status_code, "cached =", first.json()["cached"])

        await asyncio.sleep(0.2)
        second = await client.get(PRODUCTS_URL, params={"take": 20})
        print("second:", second.status_code, "cached =", second.json()["cached"])
        print("encoding:", second.headers.get("content-encoding"))

        etag = second.headers["etag"]
        conditional = await client.get(
            PRODUCTS_URL, params={"take": 20}, headers={"If-None-Match": etag}
        )
        print("conditional:", conditional.status_code)

        created = await client.post(
            PRODUCTS_URL, json={"companyId": 1, "name": "Fresh product", "price": 1.5}
        )
        print("created:", created.status_code, created.json()["id"])

        await asyncio.sleep(0.2)
        after = await client.get(PRODUCTS_URL, params={"take": 20})
        print(
            "after write:", after.json()["cached"],
            "total", after.json()["pagination"]["total"],
        )

        stats = await client.get(f"{BASE_URL}/cache/stats")
        print("stats:", stats.json()["stats"])


if __name__ == "__main__":
    asyncio.run(main())
