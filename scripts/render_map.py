# scripts/render_map.py
"""Log in as a player and write the fleet map (your vehicles, other players, garages) to HTML."""

import argparse
import getpass
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from cybertaxi.client.api_client import ClientError, CyberTaxiClient, DEFAULT_BASE_URL
from cybertaxi.client.fleet_map import render_fleet_map


def main():
    parser = argparse.ArgumentParser(description="Render a CyberTaxi fleet map")
    parser.add_argument("username")
    parser.add_argument("--password", help="Prompted for when omitted")
    parser.add_argument("--api", default=DEFAULT_BASE_URL, help=f"API base URL (default {DEFAULT_BASE_URL})")
    parser.add_argument("--output", default="fleet_map.html")
    args = parser.parse_args()

    password = args.password or getpass.getpass(f"Password for {args.username}: ")
    client = CyberTaxiClient(args.api)
    try:
        client.login(args.username, password)
        fleet_map = render_fleet_map(client, args.output)
    except ClientError as e:
        print(f"Error: {e.message}")
        sys.exit(1)

    print(f"Wrote {args.output} with {fleet_map.marker_count} markers")


if __name__ == "__main__":
    main()
