import requests

from envreports.constants import FIRE_COLUMNS, FIRE_DATA_PATH, FIRE_DATA_URL


def fetch_forest_fires(url=FIRE_DATA_URL):
    """Download the forest-fires CSV and return its text."""
    print(f"  Fetching forest fires data from {url}...")
    resp = requests.get(url, timeout=60)
    resp.raise_for_status()
    text = resp.text

    header = text.splitlines()[0].strip().split(",")
    missing = [c for c in FIRE_COLUMNS if c not in header]
    if missing:
        raise ValueError(f"Downloaded file is missing columns: {missing}")
    return text


def main():
    text = fetch_forest_fires()
    with open(FIRE_DATA_PATH, "w", newline="") as f:
        f.write(text)

    n_rows = len(text.splitlines()) - 1
    print(f"\nDone! Wrote {n_rows:,} rows to {FIRE_DATA_PATH}")


if __name__ == "__main__":
    main()
