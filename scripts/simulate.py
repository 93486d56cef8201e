"""
Storefront Concurrency Simulation

Fires many independent customers at a running server at once. Each one
registers, logs in, reads the menu, submits a cart (plain or with delivery
details) and checks that the order shows up in its own history and
nobody else's.

Run from project root: python scripts/simulate.py --customers 50
"""

import asyncio
import sys
import random
import time
import uuid
import argparse
from datetime import datetime
from typing import Any

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Configuration
API_BASE_URL = "http://localhost:3000"
TOTAL_CUSTOMERS = 50

FIRST_NAMES = ["Ana", "Bruno", "Carla", "Diego", "Elisa", "Fábio", "Gabriela", "Heitor", "Isabela", "João"]
LAST_NAMES = ["Silva", "Souza", "Oliveira", "Santos", "Lima", "Costa", "Pereira", "Almeida"]
STREETS = ["Rua das Flores", "Av. Paulista", "Rua Augusta", "Rua da Consolação", "Av. Brasil"]
PAYMENTS = ["pix", "cartao", "dinheiro"]


def generate_random_customer() -> dict[str, str]:
    """Generate random customer info with a unique email."""
    first = random.choice(FIRST_NAMES)
    last = random.choice(LAST_NAMES)
    return {
        "name": f"{first} {last}",
        "email": f"sim-{uuid.uuid4().hex[:12]}@example.com",
        "password": f"pw-{uuid.uuid4().hex[:10]}",
        "phone": f"11 9{random.randint(1000, 9999)}-{random.randint(1000, 9999)}",
        "address": f"{random.choice(STREETS)}, {random.randint(1, 999)}",
    }


def generate_random_cart(menu: dict[str, list[dict]]) -> tuple[list[dict], float]:
    """Pick 1-4 menu items; return cart lines and their total."""
    all_items = [item for items in menu.values() for item in items]
    lines = []
    for item in random.sample(all_items, k=min(len(all_items), random.randint(1, 4))):
        lines.append({
            "item_id": item["id"],
            "quantity": random.randint(1, 3),
            "unit_price": item["price"],
        })
    total = round(sum(line["quantity"] * line["unit_price"] for line in lines), 2)
    return lines, total


async def run_customer(
    client: httpx.AsyncClient,
    customer_num: int,
) -> dict[str, Any]:
    """Register, order and read history for one customer."""
    customer = generate_random_customer()
    finalize = customer_num % 2 == 0
    start_time = time.time()

    def failure(step: str, error: str) -> dict[str, Any]:
        return {
            "customer_num": customer_num,
            "success": False,
            "step": step,
            "error": error[:100],
            "time": round(time.time() - start_time, 3),
        }

    try:
        response = await client.post(
            "/api/auth/register",
            json={
                "email": customer["email"],
                "password": customer["password"],
                "name": customer["name"],
                "phone": customer["phone"],
            },
        )
        if response.status_code != 201:
            return failure("register", response.text)

        response = await client.post(
            "/api/auth/login",
            json={"email": customer["email"], "password": customer["password"]},
        )
        if response.status_code != 200:
            return failure("login", response.text)
        headers = {"Authorization": f"Bearer {response.json()['token']}"}

        response = await client.get("/api/menu")
        if response.status_code != 200:
            return failure("menu", response.text)
        items, total = generate_random_cart(response.json())

        if finalize:
            response = await client.post(
                "/api/finalizar",
                json={
                    "name": customer["name"],
                    "phone": customer["phone"],
                    "address": customer["address"],
                    "payment": random.choice(PAYMENTS),
                    "notes": random.choice([None, "Sem cebola", "Tocar o interfone"]),
                    "items": items,
                    "total": total,
                },
                headers=headers,
            )
        else:
            response = await client.post(
                "/api/pedidos",
                json={"items": items, "total": total, "details": {"origem": "simulacao"}},
                headers=headers,
            )
        if response.status_code != 201:
            return failure("order", response.text)
        order = response.json()["order"]

        response = await client.get("/api/pedidos", headers=headers)
        if response.status_code != 200:
            return failure("history", response.text)
        history = response.json()

        if any(entry["user_id"] != order["user_id"] for entry in history):
            return failure("history", "history contains another customer's order")
        if not finalize and [entry["id"] for entry in history] != [order["id"]]:
            return failure("history", f"expected only order #{order['id']}, got {len(history)} orders")

        return {
            "customer_num": customer_num,
            "success": True,
            "order_id": order["id"],
            "total": total,
            "time": round(time.time() - start_time, 3),
            "mode": "finalizar" if finalize else "pedidos",
        }

    except httpx.HTTPError as e:
        return failure("transport", str(e))


# =============================================================================
# MAIN SIMULATION RUNNER
# =============================================================================

async def check_single_flows() -> bool:
    """Pre-flight checks before the concurrent run."""
    print("\n" + "=" * 70)
    print("PRE-FLIGHT CHECKS")
    print("=" * 70)

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        print("\n1. Health Check...")
        response = await client.get("/health")
        if response.status_code != 200:
            print(f"   Failed: {response.text}")
            return False
        data = response.json()
        print(f"   Status: {data.get('status')}")
        print(f"   Auth: {data.get('auth_service')}  Store: {data.get('store')}")

        print("\n2. Menu...")
        response = await client.get("/api/menu")
        if response.status_code != 200 or not response.json():
            print(f"   Failed: {response.text[:100]}")
            return False
        print(f"   Categories: {', '.join(response.json())}")

        print("\n3. Auth gate...")
        response = await client.get("/api/pedidos")
        if response.status_code != 401:
            print(f"   Expected 401, got {response.status_code}")
            return False
        print("   Anonymous history request rejected")

    print("\n" + "=" * 70)
    return True


async def run_simulation(num_customers: int = TOTAL_CUSTOMERS) -> dict[str, Any]:
    """Run all customers concurrently and print a summary."""
    print("=" * 70)
    print("STOREFRONT SIMULATION - CONCURRENT CUSTOMERS")
    print("=" * 70)
    print(f"Customers: {num_customers}")
    print(f"Target: {API_BASE_URL}")
    print(f"Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()

    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        tasks = [run_customer(client, i + 1) for i in range(num_customers)]
        results = await asyncio.gather(*tasks)

    total_time = round(time.time() - start_time, 2)

    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print("\n" + "=" * 70)
    print("SIMULATION RESULTS")
    print("=" * 70)
    print(f"\nSuccessful customers: {len(successful)}/{num_customers}")
    print(f"Failed customers: {len(failed)}/{num_customers}")
    print(f"Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"\nAverage journey: {avg_time}s")
        print(f"Fastest: {min(r['time'] for r in successful)}s")
        print(f"Slowest: {max(r['time'] for r in successful)}s")
        print(f"Order value: R$ {sum(r['total'] for r in successful):.2f}")

    if failed:
        print("\nFailures (showing first 5):")
        for f in failed[:5]:
            print(f"   Customer #{f['customer_num']} at {f['step']}: {f['error']}")

    print("=" * 70)

    return {
        "total": num_customers,
        "successful": len(successful),
        "failed": len(failed),
        "total_time": total_time,
        "results": results,
    }


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Storefront Concurrency Simulation")
    parser.add_argument("--customers", type=int, default=TOTAL_CUSTOMERS, help="Number of customers")
    parser.add_argument("--base-url", default=API_BASE_URL, help="Server base URL")
    parser.add_argument("--skip-checks", action="store_true", help="Skip pre-flight checks")
    args = parser.parse_args()

    API_BASE_URL = args.base_url

    if not args.skip_checks and not asyncio.run(check_single_flows()):
        print("\nPre-flight checks failed. Fix issues before running the simulation.")
        sys.exit(1)

    summary = asyncio.run(run_simulation(args.customers))
    sys.exit(0 if summary["failed"] == 0 else 1)
