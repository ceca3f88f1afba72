"""Example: a few live requests against the BKK FUTÁR service.

Requires the package to be installed (`pip install -e .`).
"""

from pprint import pprint

from futar import FutarClient, InvalidArgumentError
from futar.utils import setup_logging

STOP_ID = "BKK_F01080"  # Deák Ferenc tér


if __name__ == "__main__":
    import asyncio

    async def main():
        setup_logging(level="INFO", format_type="text")
        client = FutarClient({"includeReferences": False})

        print(f"Fetching departures for {STOP_ID}...\n")
        departures = await client.arrivals_and_departures_for_stop(
            {"stopId": STOP_ID, "minutesAfter": 15}
        )
        pprint(departures.get("entry", {}).get("stopTimes", [])[:3])

        print("\n" + "*" * 80 + "\n")
        print("Planning a trip from Deák Ferenc tér to Széll Kálmán tér...\n")
        plan = await client.plan_trip(
            {
                "fromLat": 47.4979,
                "fromLon": 19.0548,
                "fromName": "Deák Ferenc tér",
                "toLat": 47.5075,
                "toLon": 19.0251,
                "toName": "Széll Kálmán tér",
                "numItineraries": 2,
            }
        )
        pprint([i.get("duration") for i in plan.get("entry", {}).get("plan", {}).get("itineraries", [])])

        try:
            await client.stop()
        except InvalidArgumentError as exc:
            print(f"\nRejected locally: {exc}")

    asyncio.run(main())
