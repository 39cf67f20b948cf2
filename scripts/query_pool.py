"""Query a running pool API for its state and a ladder of quotes.

Usage:
    python -m scripts.query_pool --url http://localhost:8000 --direction base-out \
        --amounts 1000000 100000000 10000000000
"""

import argparse
import sys

import httpx
import structlog

logger = structlog.get_logger()


def fetch_ladder(
    client: httpx.Client, direction: str, amounts: list[int]
) -> list[dict[str, str]]:
    """Quote each amount; failed quotes carry the API's error code instead."""
    ladder = []
    for amount in amounts:
        response = client.get(f"/quote/{direction}", params={"amount": amount})
        if response.status_code == 200:
            ladder.append(response.json())
        else:
            body = response.json()
            logger.warning("quote_failed", amount=amount, error=body.get("error"))
            ladder.append({"amount": str(amount), "error": body.get("error", "unknown")})
    return ladder


def main() -> int:
    parser = argparse.ArgumentParser(description="Query a pool API")
    parser.add_argument("--url", default="http://localhost:8000", help="API base URL")
    parser.add_argument(
        "--direction",
        default="base-out",
        choices=["base-out", "quote-out", "base-in", "quote-in"],
    )
    parser.add_argument("--amounts", type=int, nargs="+", default=[10**6, 10**8, 10**10])
    parser.add_argument("--timeout", type=float, default=10.0, help="Request timeout seconds")
    args = parser.parse_args()

    try:
        with httpx.Client(base_url=args.url, timeout=args.timeout) as client:
            response = client.get("/pool")
            response.raise_for_status()
            state = response.json()
            ladder = fetch_ladder(client, args.direction, args.amounts)
    except httpx.HTTPError as err:
        logger.error("pool_api_unreachable", url=args.url, error=str(err))
        print(f"Error: {err}", file=sys.stderr)
        return 1

    print(f"Pool {state['address']}  version {state['rebalanceVersion']}  A={state['ampl']}")
    print(f"  base {state['baseBalance']}  quote {state['quoteBalance']}  price {state['price']}")
    for row in ladder:
        if "error" in row:
            print(f"  {args.direction} {row['amount']}: {row['error']}")
        else:
            print(f"  in {row['amountIn']:>30}  out {row['amountOut']:>30}  fee {row['fee']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
