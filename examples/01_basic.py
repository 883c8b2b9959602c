"""
Connect and look up items by path
"""
import asyncio
import os
from drivepy import DriveClient


async def main():
    async with DriveClient(api_key=os.environ["DRIVE_API_KEY"]) as client:
        items = client.items(os.environ["DRIVE_ID"])

        found = await items.find_by_path("/docs/report.pdf")
        if found is None:
            print("Nothing at /docs/report.pdf")
        elif found.kind == "file":
            print(f"File: {found.item.name} ({found.item.size} bytes)")

        # Directories come back as listings, possibly empty
        listing = await items.find_by_path("/docs", case_sensitive=False)
        if listing is not None and listing.kind == "directory":
            for item in listing:
                print(f"  {item.item_type.value:7} {item.name}")


if __name__ == "__main__":
    asyncio.run(main())
