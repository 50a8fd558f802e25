import asyncio
import csv
import json
import logging
import random
from pathlib import Path

from .orchestrator import AcquisitionOrchestrator, scrape_listing

CSV_FIELDS = [
    "source_url", "address", "price", "beds", "baths", "sqft", "property_type",
    "market_status", "valuation_estimate", "last_sold_price", "last_sold_date", "error",
]


def parse_args(argv=None):
    import argparse
    p = argparse.ArgumentParser(description="Extract listing facts from Zillow, Redfin or Homes.com pages.")
    p.add_argument("urls", nargs="*", help="Listing URLs. If omitted, URLs are read from --urls-file")
    p.add_argument("--urls-file", help="Text file with one listing URL per line")
    p.add_argument("--concurrency", type=int, default=3)
    p.add_argument("--output", help="Optional path to save results as .json or .csv")
    p.add_argument("--print-details", action="store_true", help="Print each listing row to stdout")
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging for the scraper")
    return p.parse_args(argv)


def load_urls(args) -> list[str]:
    urls = list(args.urls or [])
    if args.urls_file:
        path = Path(args.urls_file)
        if not path.exists():
            raise FileNotFoundError(f"URLs file not found: {path}")
        for line in path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                urls.append(line)
    return urls


def to_row(url: str, resp) -> dict:
    row = {"source_url": url, "error": resp.error}
    if resp.data is not None:
        row.update(resp.data.model_dump(exclude={"comparable_listings", "valuation_estimate_note"}))
    return row


def save(rows: list[dict], out_path: str) -> None:
    if out_path.lower().endswith(".json"):
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(rows, f, indent=2, ensure_ascii=False, default=str)
    elif out_path.lower().endswith(".csv"):
        with open(out_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
            writer.writeheader()
            for r in rows:
                writer.writerow({k: r.get(k) for k in CSV_FIELDS})
    else:
        raise ValueError(f"Unknown output format for '{out_path}'. Use .json or .csv")
    print(f"Saved {len(rows)} listings to {out_path}")


async def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    urls = load_urls(args)
    if not urls:
        print("No URLs given.")
        return []

    orch = AcquisitionOrchestrator()
    sem = asyncio.Semaphore(max(1, args.concurrency))

    async def scrape_one(url):
        async with sem:
            # stagger bursts when several URLs hit the same site
            await asyncio.sleep(random.uniform(0.3, 1.3))
            print(f"\n🔍 Scraping {url} ...")
            resp = await scrape_listing(url, orch)
            if resp.success:
                print(f"✅ {url}: ${resp.data.price:,.0f} | {resp.data.address}")
            else:
                print(f"❌ {url}: {resp.error}")
            return url, resp

    results = await asyncio.gather(*(scrape_one(u) for u in urls))
    rows = [to_row(url, resp) for url, resp in results]

    if args.print_details:
        for url, resp in results:
            if not resp.success:
                continue
            d = resp.data
            print(f"- {d.address} | ${d.price:,.0f} | {d.beds} bd / {d.baths:g} ba | {d.sqft:,} sqft | "
                  f"{d.property_type} | {d.market_status}")
            for c in d.comparable_listings:
                print(f"    comp ${c.price:,.0f} {c.url or ''}")

    if args.output:
        save(rows, args.output)

    ok = sum(1 for _, r in results if r.success)
    print(f"\nExtracted {ok}/{len(results)} listing(s).")
    return rows


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
